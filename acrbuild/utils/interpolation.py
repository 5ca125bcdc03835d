# interpolation - expansion of ${...} and @...@ expressions against a chain of value sources
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
The `Interpolator` which replaces expressions such as ``${project.version}`` or ``@name@`` in a string with
values from an ordered list of value sources.

Expressions whose value cannot be found are left unchanged. Values may themselves contain expressions, which are
expanded recursively; an expression that refers back to itself raises a `FilteringException`.
"""

import re, os, logging

from acrbuild.utils.buildexceptions import FilteringException

log = logging.getLogger('acrbuild.interpolation')

DEFAULT_DELIMITERS = ['${*}', '@']

def parseDelimiter(spec):
	"""
	Convert a delimiter specification into a (begin, end) tuple. A specification containing a ``*`` gives the
	begin and end strings either side of it; otherwise the same string is used for both.

	>>> parseDelimiter('${*}')
	('${', '}')
	>>> parseDelimiter('@')
	('@', '@')
	"""
	if '*' in spec:
		begin, end = spec.split('*', 1)
		if not begin or not end: raise FilteringException('Invalid filtering delimiter: "%s"'%spec)
		return (begin, end)
	if not spec: raise FilteringException('Filtering delimiters must not be empty')
	return (spec, spec)

class MapValueSource(object):
	""" Looks up expressions in a dictionary, optionally after stripping one of the specified prefixes. """
	def __init__(self, values, prefixes=None):
		self.values = values
		self.prefixes = prefixes or []

	def getValue(self, expression):
		if not self.prefixes: return self.values.get(expression)
		for p in self.prefixes:
			if expression.startswith(p):
				return self.values.get(expression[len(p):])
		return None

	def __repr__(self): return 'MapValueSource(%d values, prefixes=%s)'%(len(self.values), self.prefixes)

class ObjectValueSource(object):
	"""
	Resolves dotted expressions such as ``project.build.finalName`` by walking the attributes (or dictionary keys)
	of a root object, after stripping one of the specified prefixes.

	>>> class B(object): finalName = 'myapp-1.0'
	>>> class P(object): build = B(); properties = {'x.y':'z'}
	>>> ObjectValueSource(['project.', 'pom.'], P()).getValue('pom.build.finalName')
	'myapp-1.0'
	>>> ObjectValueSource(['project.'], P()).getValue('project.build.missing') is None
	True
	"""
	def __init__(self, prefixes, root):
		self.prefixes = prefixes
		self.root = root

	def getValue(self, expression):
		for p in self.prefixes:
			if expression.startswith(p):
				path = expression[len(p):]
				break
		else:
			return None
		value = self.root
		for element in path.split('.'):
			if isinstance(value, dict):
				value = value.get(element)
			elif element.startswith('_'):
				return None
			else:
				value = getattr(value, element, None)
			if value is None: return None
		if callable(value) or isinstance(value, (dict, list, tuple)): return None
		return value

class EnvironmentValueSource(object):
	""" Resolves ``env.NAME`` expressions from the environment (case-insensitively on Windows). """
	def __init__(self, environ=None):
		environ = os.environ if environ is None else environ
		if os.name == 'nt':
			self.environ = {k.upper(): v for k, v in environ.items()}
		else:
			self.environ = dict(environ)

	def getValue(self, expression):
		if not expression.startswith('env.'): return None
		name = expression[4:]
		return self.environ.get(name.upper() if os.name == 'nt' else name)

_WINDOWS_PATH = re.compile(r'.*[a-zA-Z]:\\.*', re.DOTALL)

def escapeWindowsPath(value):
	r"""
	Double each backslash of values that look like Windows paths, leaving backslashes that are already doubled alone.

	>>> print(escapeWindowsPath('c:\\dir\\file'))
	c:\\dir\\file
	>>> print(escapeWindowsPath('c:\\\\already\\\\escaped'))
	c:\\already\\escaped
	>>> print(escapeWindowsPath('not\\a\\path'))
	not\a\path
	"""
	if not value or not _WINDOWS_PATH.match(value): return value
	return re.sub(r'\\\\?', lambda m: '\\\\', value)

class Interpolator(object):
	"""
	Expands expressions in strings using a list of value sources, the first source returning a value for an
	expression wins.

	@param valueSources: a list of objects with a getValue(expression) method returning a value or None.

	@param delimiters: a list of delimiter specifications such as ``${*}`` or ``@``.

	@param escapeString: if set, a token immediately preceded by this string is not expanded; the escape string is
	removed and the token is output literally.

	@param postProcessor: an optional function (expression, value) returning the value to substitute.

	>>> i = Interpolator([MapValueSource({'a':'A', 'b':'${a}-B', 'c':'${c}', 'win':'c:\\\\x'})], escapeString='\\\\')
	>>> i.interpolate('${a} @b@ ${missing} @ \\\\${a} email@host')
	'A A-B ${missing} @ ${a} email@host'
	>>> i.interpolate('${c}')
	Traceback (most recent call last):
	...
	acrbuild.utils.buildexceptions.FilteringException: Expression cycle detected: c -> c
	"""
	def __init__(self, valueSources, delimiters=None, escapeString=None, postProcessor=None):
		self.valueSources = list(valueSources)
		self.delimiters = [parseDelimiter(d) for d in (DEFAULT_DELIMITERS if delimiters is None else delimiters)]
		self.escapeString = escapeString or None
		self.postProcessor = postProcessor

	def resolve(self, expression, _stack=()):
		""" Returns the fully expanded value of an expression, or None if no source can provide it. """
		if expression in _stack:
			raise FilteringException('Expression cycle detected: %s'%' -> '.join(_stack+(expression,)))
		for source in self.valueSources:
			value = source.getValue(expression)
			if value is not None: break
		else:
			return None

		if isinstance(value, bool): value = 'true' if value else 'false'
		value = self.interpolate(str(value), _stack+(expression,))
		if self.postProcessor is not None: value = self.postProcessor(expression, value)
		return value

	def __nextToken(self, text, pos):
		# returns the earliest (start, begin, end, endIndex) after pos, or None
		best = None
		for begin, end in self.delimiters:
			start = text.find(begin, pos)
			while start != -1:
				endIndex = text.find(end, start+len(begin))
				if endIndex == -1: break
				expr = text[start+len(begin):endIndex]
				if expr and not any(c.isspace() for c in expr): # tokens never contain whitespace
					if best is None or start < best[0]:
						best = (start, begin, end, endIndex)
					break
				start = text.find(begin, start+1)
		return best

	def interpolate(self, text, _stack=()):
		""" Returns a copy of text with every resolvable expression replaced by its value. """
		if not text: return text
		result = []
		pos = 0
		while True:
			token = self.__nextToken(text, pos)
			if token is None:
				result.append(text[pos:])
				break
			start, begin, end, endIndex = token
			after = endIndex+len(end)

			esc = self.escapeString
			if esc and start-len(esc) >= pos and text.startswith(esc, start-len(esc)):
				result.append(text[pos:start-len(esc)])
				result.append(text[start:after])
				pos = after
				continue

			value = self.resolve(text[start+len(begin):endIndex], _stack)
			if value is None:
				result.append(text[pos:after])
			else:
				result.append(text[pos:start])
				result.append(value)
			pos = after
		return ''.join(result)
