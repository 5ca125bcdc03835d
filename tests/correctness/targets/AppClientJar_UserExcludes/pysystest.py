__pysys_title__   = r""" AppClientJar - user excludes from the plugin configuration """
#                        ================================================================================
__pysys_purpose__ = r""" The configured excludes are applied in addition to the deployment descriptor, which is still
	added to the archive exactly once.
	"""

__pysys_authors__ = "bsp"
__pysys_created__ = "2024-03-11"

import pysys
from pysys.constants import *
from acrbuildtest.acrbuild_basetest import AcrbuildBaseTest

class PySysTest(AcrbuildBaseTest):
	def execute(self):
		self.acrbuild(stdouterr='acrbuild')

	def validate(self):
		entries = self.getJarEntries('project/target/myclient-1.0.jar')
		self.assertThat('"com/example/Main.class" in entries', entries=entries)
		self.assertThat('"com/example/LoginDevOnly.class" not in entries', entries=entries)
		self.assertThat('"com/example/internal/Helper.class" not in entries', entries=entries)
		self.assertThat('"com/example/internal/" not in entries', entries=entries)
		self.assertThat('entries.count("META-INF/application-client.xml") == 1', entries=entries)

		self.assertGrep('acrbuild.log', expr=r"Parameter excludes = \['\*\*/\*DevOnly.class', 'com/example/internal/'\]")
		self.assertGrep('acrbuild.out', expr=r"WARN", contains=False)
