# acrbuild - JavaEE Application Client archive builder
#
# This module holds definitions that are used throughout acrbuild.
#
# Copyright (c) 2013 - 2017, 2019 Software AG, Darmstadt, Germany and/or its licensors
#
#   Licensed under the Apache License, Version 2.0 (the "License");
#   you may not use this file except in compliance with the License.
#   You may obtain a copy of the License at
#
#       http://www.apache.org/licenses/LICENSE-2.0
#
#   Unless required by applicable law or agreed to in writing, software
#   distributed under the License is distributed on an "AS IS" BASIS,
#   WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#   See the License for the specific language governing permissions and
#   limitations under the License.
#

"""
Contains useful constants such as `acrbuild.buildcommon.ACRBUILD_VERSION`, and version comparison.
"""

import os, inspect

# do NOT define a 'log' variable here or other modules will use it by mistake

def __getAcrbuildVersion():
	with open(os.path.join(os.path.dirname(os.path.abspath(inspect.getfile(inspect.currentframe()))), "ACRBUILD_VERSION")) as f:
		return f.read().strip()
ACRBUILD_VERSION: str = __getAcrbuildVersion()
"""The current acrbuild version."""

CREATED_BY: str = 'acrbuild %s'%ACRBUILD_VERSION
"""The value written to the Created-By header of every manifest."""

def compareVersions(v1: str, v2: str) -> int:
	""" Compares two dotted version strings, returning a negative number if v1 is older than v2, 0 if they are the
	same and a positive number otherwise.

	>>> compareVersions('3.2.0', '3.10')
	-1
	>>> compareVersions('3.2', '3.2.0')
	0
	>>> compareVersions('4.0-SNAPSHOT', '3.9')
	1
	"""
	def parts(v):
		return [int(x) if x.isdigit() else 0 for x in v.split('-')[0].split('.')]
	v1, v2 = parts(v1), parts(v2)
	while len(v1) < len(v2): v1.append(0)
	while len(v2) < len(v1): v2.append(0)
	return (v1 > v2) - (v1 < v2)
