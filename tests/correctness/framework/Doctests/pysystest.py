__pysys_title__   = r""" Doctests - every acrbuild module containing examples """
#                        ================================================================================
__pysys_purpose__ = r""" Runs the doctest examples in each acrbuild module, each in its own process.
	Set DOCTEST_FILTER=<module> to run just one.
	"""

__pysys_authors__ = "bsp"
__pysys_created__ = "2024-03-19"

import pysys
from pysys.constants import *
from acrbuildtest.acrbuild_basetest import AcrbuildBaseTest

class PySysTest(AcrbuildBaseTest):

	def execute(self):
		EXCLUDED_MODULES = []

		skipped = 0

		ROOT = os.path.normpath(self.project.ACRBUILD_ROOT)
		DIR = os.path.join(ROOT, 'acrbuild')
		allScripts = []
		for dirpath, dirnames, filenames in os.walk(DIR):
			for excl in ['__pycache__']:
				if excl in dirnames: dirnames.remove(excl)

			for f in filenames:
				if f.endswith('.py') and f != '__init__.py' and f != '__main__.py':
					with open(os.path.join(dirpath, f), encoding='utf-8') as pyfile:
						if '>>>' in pyfile.read():
							if getattr(self, 'DOCTEST_FILTER', '') and self.DOCTEST_FILTER.replace('.py','') != f.replace('.py',''): continue

							allScripts.append(os.path.join(dirpath, f))

		good = bad = 0
		for f in sorted(allScripts):
			moduleName = f.replace(ROOT,'').replace('/','.').replace('\\','.').strip('.').replace('.py','')

			if any([re.search(x, moduleName) for x in EXCLUDED_MODULES]):
				self.log.info("skipping excluded module %s"%moduleName)
				skipped += 1
				continue

			environs = self.createEnvirons({'PYTHONPATH':ROOT}, command=sys.executable)
			result = self.startProcess(sys.executable, ['-m', 'doctest', '-v', f],
				environs=environs,
				stdout=moduleName+'.out', stderr=moduleName+'.err', displayName='doctest '+moduleName,
				abortOnError=True, ignoreExitStatus=True)

			if result.exitStatus != 0:
				self.logFileContents(moduleName+'.err', maxLines=0) or self.logFileContents(moduleName+'.out', maxLines=0)
				self.addOutcome(FAILED, 'doctest %s failed'%moduleName, abortOnError=False)
				bad += 1
			else:
				good += 1
		assert good+bad > 0, 'some tests should have run'
		self.log.info('Completed doctesting %d modules; %d failed', good+bad, bad)
		self.log.info("%d modules were skipped" % skipped)

	def validate(self):
		self.assertThat('not missing', missing=[m for m in [
				'acrbuild.archiver', 'acrbuild.buildcontext', 'acrbuild.utils.antglob', 'acrbuild.utils.manifest',
				'acrbuild.utils.interpolation', 'acrbuild.utils.jar', 'acrbuild.targets.appclient',
			] if not os.path.exists(os.path.join(self.output, m+'.out'))])
