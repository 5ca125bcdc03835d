__pysys_title__   = r""" AppClientJar - reproducible archives from project.build.outputTimestamp """
#                        ================================================================================
__pysys_purpose__ = r""" With an output timestamp every entry gets the same time and permissions, so building the same
	content twice gives identical archives. Invalid timestamps fail the build.
	"""

__pysys_authors__ = "bsp"
__pysys_created__ = "2024-03-15"

import pysys, zipfile, hashlib
from pysys.constants import *
from acrbuildtest.acrbuild_basetest import AcrbuildBaseTest

class PySysTest(AcrbuildBaseTest):
	def execute(self):
		self.acrbuild(project='first', stdouterr='first')
		self.wait(2.5) # so that the files of the second copy have different modification times
		self.acrbuild(project='second', stdouterr='second')
		self.acrbuild(project='epochseconds', stdouterr='epochseconds', args=['project.build.outputTimestamp=1570300662'])
		self.acrbuild(project='minutes', stdouterr='minutes', args=['project.build.outputTimestamp=2019-10-05T20:37+02:00'])
		self.invalidMessage = self.acrbuild(project='invalid', stdouterr='invalid', shouldFail=True,
			args=['project.build.outputTimestamp=2019-10-05 18:37:42'])

	def getEntryTimes(self, jar):
		with zipfile.ZipFile(os.path.join(self.output, jar)) as zf:
			return sorted(set(i.date_time for i in zf.infolist()))

	def getEntryModes(self, jar):
		with zipfile.ZipFile(os.path.join(self.output, jar)) as zf:
			return sorted(set((i.filename.endswith('/'), i.external_attr >> 16) for i in zf.infolist()))

	def getDigest(self, jar):
		with open(os.path.join(self.output, jar), 'rb') as f:
			return hashlib.sha256(f.read()).hexdigest()

	def validate(self):
		jar = '%s/target/myclient-1.0.jar'
		self.assertThat('times == expected', times=self.getEntryTimes(jar%'first'), expected=[(2020, 1, 2, 3, 4, 6)])
		self.assertThat('modes == expected', modes=self.getEntryModes(jar%'first'), expected=[(False, 0o100644), (True, 0o40755)])
		self.assertThat('first == second', first=self.getDigest(jar%'first'), second=self.getDigest(jar%'second'))

		self.assertThat('times == expected', times=self.getEntryTimes(jar%'epochseconds'), expected=[(2019, 10, 5, 18, 37, 42)])
		self.assertThat('times == expected', times=self.getEntryTimes(jar%'minutes'), expected=[(2019, 10, 5, 18, 37, 0)])

		self.assertThat('actual == expected', actual=self.invalidMessage,
			expected="ACRBUILD FAILED: Invalid project.build.outputTimestamp value '2019-10-05 18:37:42'")
		self.assertPathExists(jar%'invalid', exists=False)
