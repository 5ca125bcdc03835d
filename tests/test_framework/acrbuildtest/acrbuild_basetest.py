import zipfile, shutil

from pysys.constants import *
from pysys.basetest import BaseTest
from pysys.utils.filegrep import filegrep

class AcrbuildBaseTest(BaseTest):
	def createProject(self, name='project'):
		"""
		Copies the project in the test's Input directory to the output directory, so that the build can write
		to it (and filter its deployment descriptor in place).

		@returns the absolute path of the project directory
		"""
		dest = os.path.join(self.output, name)
		shutil.copytree(self.input, dest)
		return dest

	def acrbuild(self, args=None, project='project', shouldFail=False, stdouterr='acrbuild', env=None, **kwargs):
		"""
		Runs acrbuild against the pom.xml in the specified project directory (relative to the output
		directory), which is copied from the Input directory first if it does not exist yet.

		The console output is written to <stdouterr>.out and the log (at debug level) to <stdouterr>.log.

		@param shouldFail: by default, the test will abort if the build fails.
		Set this to True if the build is expected to fail in which case
		the test will abort if it succeeds, and this method will return the
		overall failure message if not.

		@returns the failure message string if shouldFail=True, otherwise nothing
		"""
		projectDir = os.path.join(self.output, project)
		if not os.path.exists(projectDir): self.createProject(project)

		stdout, stderr = self.allocateUniqueStdOutErr(stdouterr)
		args = args or []
		try:
			try:
				environs = self.createEnvirons(env, command=sys.executable)
				environs['PYTHONPATH'] = os.path.normpath(self.project.ACRBUILD_ROOT)

				args = [
					'-m', 'acrbuild',
					'-f', os.path.join(projectDir, 'pom.xml'),
					'--logfile', os.path.join(self.output, stdout.replace('.out', '')+'.log'),
					'--log-level', 'debug',
					]+args

				result = self.startProcess(sys.executable, args,
					environs=environs, workingDir=projectDir,
					stdout=stdout, stderr=stderr, displayName=('acrbuild %s'%' '.join(args[2:])).strip(),
					abortOnError=True, ignoreExitStatus=shouldFail, **kwargs)
				if shouldFail and result.exitStatus != 0: raise Exception('Build failed as expected')
			finally:
				self.logFileContents(stdout, tail=True) or self.logFileContents(stderr, tail=True)

		except AssertionError as e:
			self.log.exception('Assertion error: ')
			raise
		except Exception as e:
			m = None
			try:
				m = filegrep(stdout, '(ACRBUILD FAILED: .*)', returnMatch=True)
				if m: m = m.group(1)
			except Exception as e2:
				if shouldFail: raise e2 # this is fatal if we need the error message
				self.log.exception('Error handling block failed: ')
			if not m: self.log.warning('Caught exception running build: %s', e)
			m = m or '<unknown failure>'

			if shouldFail:
				self.log.info('Build failed as expected; message is: %s', m)
				return m
			else:
				self.abort(BLOCKED, 'Build %s failed unexpectedly: %s'%(stdouterr, m))
		else:
			if shouldFail:
				self.abort(FAILED, 'build %s was expected to fail but succeeded'%stdouterr)

		return None

	def getJarEntries(self, jar):
		"""
		Returns the entry names of the specified archive (relative to the output directory), in archive order,
		and also writes them to <jar basename>-entries.txt for use with assertGrep.
		"""
		with zipfile.ZipFile(os.path.join(self.output, jar)) as zf:
			entries = zf.namelist()
		with open(os.path.join(self.output, os.path.basename(jar)+'-entries.txt'), 'w', encoding='utf-8') as f:
			f.write('\n'.join(entries)+'\n')
		return entries

	def readJarEntry(self, jar, name):
		""" Returns the contents of the specified archive entry, decoded as UTF-8. """
		with zipfile.ZipFile(os.path.join(self.output, jar)) as zf:
			return zf.read(name).decode('utf-8')

	def extractJarEntry(self, jar, name, dest):
		""" Writes the contents of an archive entry to dest (relative to the output directory) for use with assertGrep. """
		with zipfile.ZipFile(os.path.join(self.output, jar)) as zf:
			data = zf.read(name)
		with open(os.path.join(self.output, dest), 'wb') as f:
			f.write(data)
		return dest
