# flatten - normalization of list-valued configuration
#
# Copyright (c) 2013 - 2019 Software AG, Darmstadt, Germany and/or its licensors
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
Normalization of the list-valued parameters such as ``excludes`` and ``filters``, which may arrive as a
comma-separated string (from a user property), a list (from the pom) or nested lists (from code).
"""

import types

def flatten(input) -> list:
	"""Return the items of an arbitrarily nested structure of lists, tuples and generators as a single list,
	dropping empty strings and None.

	>>> flatten('**/*.class')
	['**/*.class']
	>>> flatten(['a/**', ('b/', ['c/*.txt']), '', None])
	['a/**', 'b/', 'c/*.txt']
	>>> flatten(p+'/' for p in ['CVS', '.git'])
	['CVS/', '.git/']
	>>> flatten(None)
	[]
	"""
	if input is None or input == '': return []
	if not isinstance(input, (list, tuple, set, types.GeneratorType)):
		return [input]
	result = []
	for item in input:
		result.extend(flatten(item))
	return result

def getStringList(value) -> list:
	""" Return the strings of a list-valued parameter.

	Strings are split on commas. A pom list with a single child element (for example
	``<filters><filter>a.properties</filter></filters>``) arrives as a one-entry dictionary, whose value is used.

	>>> getStringList('**/*.txt, **/*DevOnly.class')
	['**/*.txt', '**/*DevOnly.class']
	>>> getStringList(('abc', ['def']))
	['abc', 'def']
	>>> getStringList({'filter': 'src/main/filters/server.properties'})
	['src/main/filters/server.properties']
	>>> getStringList(None)
	[]
	>>> getStringList(5)
	Traceback (most recent call last):
	...
	ValueError: The specified value must be a list of strings: "5"
	"""
	if isinstance(value, dict) and len(value) == 1:
		value = list(value.values())[0]
	if isinstance(value, str):
		return [x.strip() for x in value.split(',') if x.strip()]

	result = flatten(value) if isinstance(value, (list, tuple, types.GeneratorType)) or value is None else None
	if result is None or not all(isinstance(x, str) for x in result):
		raise ValueError('The specified value must be a list of strings: "%s"'%(value,))
	return [x.strip() for x in result if x.strip()]
