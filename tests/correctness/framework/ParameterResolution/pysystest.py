__pysys_title__   = r""" Parameters - configuration, user properties, deprecated properties and defaults """
#                        ================================================================================
__pysys_purpose__ = r""" """

__pysys_authors__ = "bsp"
__pysys_created__ = "2024-03-20"

import pysys
from pysys.constants import *
from acrbuildtest.acrbuild_basetest import AcrbuildBaseTest

class PySysTest(AcrbuildBaseTest):
	def execute(self):
		self.acrbuild(project='default', stdouterr='default')
		self.acrbuild(project='property', stdouterr='property', args=['maven.acr.outputDirectory=alt-classes'])
		self.acrbuild(project='legacy', stdouterr='legacy', args=['outputDirectory=alt-classes'])
		self.acrbuild(project='both', stdouterr='both', args=['maven.acr.outputDirectory=alt-classes', 'outputDirectory=classes'])

	def validate(self):
		for project, expected in [('default', 'Main'), ('property', 'Alt'), ('legacy', 'Alt'), ('both', 'Alt')]:
			# the plugin configuration takes precedence over the finalName default
			entries = self.getJarEntries(project+'/target/configured.jar')
			self.assertThat('classes == [expected]', expected='com/example/%s.class'%expected,
				classes=[e for e in entries if e.endswith('.class')])

		self.assertGrep('legacy.out', expr=r'WARNING.*The property "outputDirectory" is deprecated, please use "maven.acr.outputDirectory" instead')
		self.assertGrep('both.out', expr=r'deprecated', contains=False)

		self.assertGrep('default.out', expr=r'WARNING.*Ignoring unknown configuration parameter for AppClientJar: "unknownParameter"')
		self.assertGrep('default.out', expr=r'WARNING.*Project com.example:myclient:app-client:1.0 asks for maven-acr-plugin version 99.0 but this is acrbuild [0-9.]+')
		self.assertGrep('default.log', expr=r"Parameter outputDirectory = '.*default.classes'")
