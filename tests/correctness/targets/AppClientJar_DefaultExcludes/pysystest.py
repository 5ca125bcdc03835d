__pysys_title__   = r""" AppClientJar - default includes and excludes, archive name and artifact """
#                        ================================================================================
__pysys_purpose__ = r""" The deployment descriptor is excluded from the directory scan and added separately (unfiltered),
	editor backup files and any existing manifest are left out, and the archive is written to
	target/<finalName>.jar and recorded as the project artifact.
	"""

__pysys_authors__ = "bsp"
__pysys_created__ = "2024-03-11"

import pysys
from pysys.constants import *
from acrbuildtest.acrbuild_basetest import AcrbuildBaseTest

class PySysTest(AcrbuildBaseTest):
	def execute(self):
		self.acrbuild(stdouterr='acrbuild')
		self.jar = 'project/target/myclient-1.0.jar'

	def validate(self):
		self.assertGrep('acrbuild.out', expr=r"Building JavaEE Application client: myclient-1.0$")
		self.assertGrep('acrbuild.out', expr=r"ACRBUILD SUCCEEDED: .*myclient-1.0.jar")
		self.assertGrep('acrbuild.log', expr=r'Publishable artifact path for JavaEE Application Client archive: ".*target.myclient-1.0.jar"')

		self.assertPathExists(self.jar)
		entries = self.getJarEntries(self.jar)
		self.assertThat('entries == expected', entries=entries, expected=[
			'META-INF/',
			'META-INF/MANIFEST.MF',
			'META-INF/application-client.xml',
			'META-INF/maven/',
			'META-INF/maven/com.example/',
			'META-INF/maven/com.example/myclient/',
			'META-INF/maven/com.example/myclient/pom.properties',
			'META-INF/maven/com.example/myclient/pom.xml',
			'com/',
			'com/example/',
			'com/example/Main.class',
			])

		# not filtered by default
		self.assertThat('token in descriptor', token='${project.version}', descriptor=self.readJarEntry(self.jar, 'META-INF/application-client.xml'))

		self.extractJarEntry(self.jar, 'META-INF/MANIFEST.MF', 'MANIFEST.MF')
		self.assertGrep('MANIFEST.MF', expr=r"^Manifest-Version: 1.0$")
		self.assertGrep('MANIFEST.MF', expr=r"^Created-By: acrbuild [0-9.]+$")
		self.assertGrep('MANIFEST.MF', expr=r"Custom-Header", contains=False)
