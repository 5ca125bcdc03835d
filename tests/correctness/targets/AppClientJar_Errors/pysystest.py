__pysys_title__   = r""" AppClientJar - failure messages """
#                        ================================================================================
__pysys_purpose__ = r""" Each kind of failure while building the archive (archiver, manifest, I/O, dependency
	resolution, filtering) is reported with its own message, and a failure while filtering leaves the
	deployment descriptor as it was.
	"""

__pysys_authors__ = "bsp"
__pysys_created__ = "2024-03-14"

import pysys
from pysys.constants import *
from acrbuildtest.acrbuild_basetest import AcrbuildBaseTest

class PySysTest(AcrbuildBaseTest):
	def execute(self):
		self.createProject('projects')

		self.mkdir('projects/archiver/target/myclient-1.0.jar')
		self.archiverMessage = self.acrbuild(project='projects/archiver', stdouterr='archiver', shouldFail=True)
		self.manifestMessage = self.acrbuild(project='projects/manifest', stdouterr='manifest', shouldFail=True)
		self.ioMessage = self.acrbuild(project='projects/io', stdouterr='io', shouldFail=True)
		self.dependencyMessage = self.acrbuild(project='projects/dependency', stdouterr='dependency', shouldFail=True)
		self.filteringMessage = self.acrbuild(project='projects/filtering', stdouterr='filtering', shouldFail=True)
		self.filterCycleMessage = self.acrbuild(project='projects/filtercycle', stdouterr='filtercycle', shouldFail=True,
			args=['a=${b}', 'b=${a}'])

	def validate(self):
		self.assertGrep('archiver.out', expr=r'ACRBUILD FAILED: There was a problem creating the JavaEE Application Client archive: The destination jar file ".*myclient-1.0.jar" is a directory$')

		self.assertThat('actual == expected', actual=self.manifestMessage,
			expected='ACRBUILD FAILED: There was a problem reading / creating the manifest for the JavaEE Application Client archive: Invalid manifest header name: "Built.By"')

		self.assertGrep('io.out', expr=r'ACRBUILD FAILED: There was a I/O problem creating the JavaEE Application Client archive: .*MANIFEST.MF')

		self.assertThat('actual == expected', actual=self.dependencyMessage,
			expected='ACRBUILD FAILED: There was a problem resolving dependencies while creating the JavaEE Application Client archive: '
				'Attempted to access the runtime classpath of project com.example:myclient:app-client:1.0 before it was resolved')

		self.assertGrep('filtering.out', expr=r'ACRBUILD FAILED: There was a problem filtering the deployment descriptor: Error loading property file ".*missing.properties": file not found$')

		self.assertThat('actual == expected', actual=self.filterCycleMessage,
			expected='ACRBUILD FAILED: There was a problem filtering the deployment descriptor: Expression cycle detected: a -> b -> a')

		for p in ['archiver', 'manifest', 'io', 'dependency', 'filtering', 'filtercycle']:
			self.assertPathExists('projects/%s/classes/META-INF/application-client.xml.unfiltered'%p, exists=False)
			if p != 'archiver':
				self.assertPathExists('projects/%s/target/myclient-1.0.jar'%p, exists=False)
			self.assertGrep(p+'.out', expr=r'Traceback', contains=False)

		# the descriptor is restored if filtering fails part way through
		self.assertGrep('projects/filtercycle/classes/META-INF/application-client.xml', expr=r"<display-name>\$\{a\}</display-name>")
