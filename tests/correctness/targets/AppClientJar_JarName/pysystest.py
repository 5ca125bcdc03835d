__pysys_title__   = r""" AppClientJar - configured jarName and build directory """
#                        ================================================================================
__pysys_purpose__ = r""" The archive is named <jarName>.jar inside the build directory; jarName can use project
	properties, and attempts to configure the read-only basedir are ignored with a warning.
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
		self.assertPathExists('project/build/myclient-enterprise.jar')
		self.assertPathExists('project/target', exists=False)
		self.assertPathExists('project/elsewhere', exists=False)
		self.assertGrep('acrbuild.out', expr=r"Building JavaEE Application client: myclient-enterprise$")
		self.assertGrep('acrbuild.out', expr=r'WARNING.*Parameter "basedir" of AppClientJar is read-only and cannot be configured; ignoring the configured value "elsewhere"')
		self.assertGrep('acrbuild.out', expr=r"ACRBUILD SUCCEEDED: .*build.myclient-enterprise.jar$")

		self.assertThat('"com/example/Main.class" in entries', entries=self.getJarEntries('project/build/myclient-enterprise.jar'))
