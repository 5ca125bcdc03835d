__pysys_title__   = r""" AppClientJar - manifest and project descriptor from the archive configuration """
#                        ================================================================================
__pysys_purpose__ = r""" The <archive> configuration controls the generated manifest: main class, Class-Path from the
	resolved runtime classpath, implementation and specification entries, explicit entries and sections, merged
	over an existing manifest file.
	"""

__pysys_authors__ = "bsp"
__pysys_created__ = "2024-03-15"

import pysys
from pysys.constants import *
from acrbuildtest.acrbuild_basetest import AcrbuildBaseTest

class PySysTest(AcrbuildBaseTest):
	def execute(self):
		classpath = [self.output+'/repo/commons-lang-2.6.jar', self.output+'/repo/gson.zip', self.output+'/repo/classes']
		self.acrbuild(stdouterr='acrbuild', args=['--classpath', os.pathsep.join(classpath)])

		jar = 'project/target/myclient-1.4.2.jar'
		self.extractJarEntry(jar, 'META-INF/MANIFEST.MF', 'MANIFEST.MF')
		self.extractJarEntry(jar, 'META-INF/maven/com.example/myclient/pom.properties', 'pom.properties')
		self.extractJarEntry(jar, 'META-INF/maven/com.example/myclient/pom.xml', 'pom.xml')

	def validate(self):
		self.assertGrep('MANIFEST.MF', expr=r"^Manifest-Version: 1.0$")
		self.assertGrep('MANIFEST.MF', expr=r"^Main-Class: com.example.Main$")
		self.assertGrep('MANIFEST.MF', expr=r"FromFile", contains=False)
		self.assertGrep('MANIFEST.MF', expr=r"^Extra-Header: from-manifest-file$")
		self.assertGrep('MANIFEST.MF', expr=r"^Class-Path: lib/commons-lang-2.6.jar lib/gson.zip$")
		self.assertGrep('MANIFEST.MF', expr=r"^Implementation-Title: Shipping Client$")
		self.assertGrep('MANIFEST.MF', expr=r"^Implementation-Version: 1.4.2$")
		self.assertGrep('MANIFEST.MF', expr=r"^Implementation-Vendor: Example Corp$")
		self.assertGrep('MANIFEST.MF', expr=r"^Specification-Version: 1.4$")
		self.assertGrep('MANIFEST.MF', expr=r"^Permissions: all-permissions$")
		self.assertGrep('MANIFEST.MF', expr=r"^Client-Version: 1.4.2$")
		self.assertOrderedGrep('MANIFEST.MF', exprList=[
			r'^Manifest-Version: ',
			r'^$',
			r'^Name: com/example/$',
			r'^Sealed: true$',
			])

		self.assertOrderedGrep('pom.properties', exprList=[
			r'^artifactId=myclient$',
			r'^groupId=com.example$',
			r'^version=1.4.2$',
			])
		self.assertGrep('pom.xml', expr=r"<name>Shipping Client</name>")
