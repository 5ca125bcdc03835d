__pysys_title__   = r""" Command line - help, invalid arguments and exit codes """
#                        ================================================================================
__pysys_purpose__ = r""" """

__pysys_authors__ = "bsp"
__pysys_created__ = "2024-03-19"

import pysys
from pysys.constants import *
from acrbuildtest.acrbuild_basetest import AcrbuildBaseTest

class PySysTest(AcrbuildBaseTest):
	def runAcrbuild(self, stdouterr, args, expectedExitStatus):
		environs = self.createEnvirons({'PYTHONPATH':os.path.normpath(self.project.ACRBUILD_ROOT)}, command=sys.executable)
		self.startProcess(sys.executable, ['-m', 'acrbuild']+args, environs=environs, workingDir=self.output+'/project',
			stdout=stdouterr+'.out', stderr=stdouterr+'.err', displayName='acrbuild '+stdouterr,
			expectedExitStatus=expectedExitStatus)

	def execute(self):
		self.createProject()
		self.runAcrbuild('help', ['--help'], '==0')
		self.runAcrbuild('bad-option', ['--no-such-option'], '==2')
		self.runAcrbuild('bad-argument', ['notaproperty'], '==2')
		self.runAcrbuild('bad-format', ['-F', 'nosuchformat'], '==1')
		self.runAcrbuild('missing-pom', ['-f', 'nosuchdir/pom.xml'], '==5')
		self.runAcrbuild('default-pom', [], '==0')

	def validate(self):
		self.assertGrep('help.out', expr=r"^python -m acrbuild \[options\]\* \[property=value\]\*")
		self.assertGrep('help.out', expr=r"--classpath <paths>")
		self.assertOrderedGrep('help.out', exprList=[r"Options:$", r"- teamcity$", r"- make$", r"- default$"])
		self.assertGrep('bad-option.out', expr=r"option --no-such-option not recognized")
		self.assertGrep('bad-argument.out', expr=r'invalid argument "notaproperty"; properties must be specified as property=value')
		self.assertGrep('bad-format.out', expr=r'invalid format "nosuchformat"; valid formatters are: teamcity, make, default')
		self.assertGrep('missing-pom.out', expr=r"\[ERROR\] \*\*\* ACRBUILD FAILED: Cannot find project file: .*nosuchdir.pom.xml")
		self.assertGrep('default-pom.out', expr=r"ACRBUILD SUCCEEDED: .*myclient-1.0.jar")
		self.assertPathExists('project/target/myclient-1.0.jar')
