__pysys_title__   = r""" AppClientJar - filtering Windows paths and non-UTF-8 descriptors """
#                        ================================================================================
__pysys_purpose__ = r""" With escapeBackslashesInFilePath, the backslashes of values that look like Windows paths are
	doubled. The descriptor is read and written using the encoding from its XML declaration.
	"""

__pysys_authors__ = "bsp"
__pysys_created__ = "2024-03-18"

import pysys, zipfile
from pysys.constants import *
from acrbuildtest.acrbuild_basetest import AcrbuildBaseTest

class PySysTest(AcrbuildBaseTest):
	def execute(self):
		self.acrbuild(project='escaped', stdouterr='escaped', args=['install.dir=C:\\apps\\billing', 'maven.acr.escapeBackslashesInFilePath=true'])
		self.acrbuild(project='plain', stdouterr='plain', args=['install.dir=C:\\apps\\billing'])

		for p in ['escaped', 'plain']:
			with zipfile.ZipFile(os.path.join(self.output, p, 'target', 'myclient-1.0.jar')) as zf:
				with open(os.path.join(self.output, p+'-application-client.xml'), 'wb') as f:
					f.write(zf.read('META-INF/application-client.xml'))

	def validate(self):
		self.assertGrep('escaped-application-client.xml', expr=r"<display-name>Caf\xe9 C:\\\\apps\\\\billing</display-name>", encoding='iso-8859-1')
		self.assertGrep('plain-application-client.xml', expr=r"<display-name>Caf\xe9 C:\\apps\\billing</display-name>", encoding='iso-8859-1')
		for p in ['escaped', 'plain']:
			self.assertGrep(p+'-application-client.xml', expr=r"<description>Billing</description>", encoding='iso-8859-1')
			self.assertGrep(p+'.log', expr=r"Filtering .*application-client.xml.unfiltered to .*application-client.xml using encoding ISO-8859-1")
