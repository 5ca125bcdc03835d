__pysys_title__   = r""" Project model - parent inheritance, build defaults and expressions """
#                        ================================================================================
__pysys_purpose__ = r""" """

__pysys_authors__ = "bsp"
__pysys_created__ = "2024-03-21"

import pysys
from pysys.constants import *
from acrbuildtest.acrbuild_basetest import AcrbuildBaseTest

class PySysTest(AcrbuildBaseTest):
	def execute(self):
		self.acrbuild(stdouterr='acrbuild', env={'ACR_TEST_MODULE':'shop-module'})
		self.jar = 'project/target/shop-client-r5.0.1.jar'
		self.extractJarEntry(self.jar, 'META-INF/application-client.xml', 'application-client.xml')
		self.extractJarEntry(self.jar, 'META-INF/maven/com.example.shop/shop-client/pom.properties', 'pom.properties')

	def validate(self):
		self.assertGrep('acrbuild.out', expr=r"Building JavaEE Application client: shop-client-r5.0.1$")
		self.assertGrep('application-client.xml', expr=r"<display-name>Shop 5.0.1</display-name>")
		self.assertGrep('application-client.xml', expr=r"<description>Shop client built with shop-client in .+project</description>")
		self.assertGrep('application-client.xml', expr=r"<module-name>shop-module</module-name>")
		self.assertGrep('pom.properties', expr=r"^groupId=com.example.shop$")
		self.assertGrep('pom.properties', expr=r"^version=5.0.1$")
