__pysys_title__   = r""" Console formats - teamcity and make """
#                        ================================================================================
__pysys_purpose__ = r""" The -F option selects the console output format; teamcity gets progress messages, build
	problems for failures only, and the published archive; make reports only errors and warnings with a location.
	"""

__pysys_authors__ = "bsp"
__pysys_created__ = "2024-03-20"

import pysys
from pysys.constants import *
from acrbuildtest.acrbuild_basetest import AcrbuildBaseTest

class PySysTest(AcrbuildBaseTest):
	def execute(self):
		self.acrbuild(project='teamcity', stdouterr='teamcity', args=['-F', 'TeamCity'])
		self.acrbuild(project='make', stdouterr='make', args=['-F', 'make'])
		self.acrbuild(project='teamcity-failure', stdouterr='teamcity-failure', args=['-F', 'teamcity', 'maven.acr.filterDeploymentDescriptor=maybe'], shouldFail=True)
		self.acrbuild(project='make-failure', stdouterr='make-failure', args=['--format=make', 'maven.acr.filterDeploymentDescriptor=maybe'], shouldFail=True)

	def validate(self):
		self.assertGrep('teamcity.out', expr=r"^##teamcity\[message text='Building JavaEE Application client: myclient-1.0'\]")
		self.assertGrep('teamcity.out', expr=r"^##teamcity\[publishArtifacts '.*myclient-1.0.jar'\]")
		self.assertGrep('teamcity.out', expr=r"^##teamcity\[progressMessage '\*\*\* ACRBUILD SUCCEEDED: .*myclient-1.0.jar'\]")
		self.assertGrep('teamcity.out', expr=r"buildProblem", contains=False)
		self.assertGrep('teamcity.out', expr=r"status='ERROR'", contains=False)

		self.assertGrep('make.out', expr=r"^\*\*\* ACRBUILD SUCCEEDED: .*myclient-1.0.jar")
		self.assertGrep('make.out', expr=r": error: ", contains=False)

		self.assertGrep('teamcity-failure.out', expr=r"^##teamcity\[buildProblem description='\*\*\* ACRBUILD FAILED: Invalid value for parameter \"filterDeploymentDescriptor\" - must be true or false: \"maybe\"'\]")
		self.assertGrep('make-failure.out', expr=r'^acrbuild: error: \*\*\* ACRBUILD FAILED: Invalid value for parameter "filterDeploymentDescriptor" - must be true or false: "maybe"')
