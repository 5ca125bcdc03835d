__pysys_title__   = r""" AppClientJar - output directory does not exist """
#                        ================================================================================
__pysys_purpose__ = r""" If there is no output directory the archive is still created, containing just the manifest and
	project descriptor.
	"""

__pysys_authors__ = "bsp"
__pysys_created__ = "2024-03-13"

import pysys
from pysys.constants import *
from acrbuildtest.acrbuild_basetest import AcrbuildBaseTest

class PySysTest(AcrbuildBaseTest):
	def execute(self):
		self.acrbuild(stdouterr='acrbuild')

	def validate(self):
		self.assertGrep('acrbuild.out', expr=r"\[INFO\] JAR will only contain the META-INF/application-client.xml as no content was marked for inclusion")
		self.assertThat('entries == expected', entries=self.getJarEntries('project/target/myclient-1.0.jar'), expected=[
			'META-INF/',
			'META-INF/MANIFEST.MF',
			'META-INF/maven/',
			'META-INF/maven/com.example/',
			'META-INF/maven/com.example/myclient/',
			'META-INF/maven/com.example/myclient/pom.properties',
			'META-INF/maven/com.example/myclient/pom.xml',
			])
		self.assertPathExists('project/target/classes', exists=False)
