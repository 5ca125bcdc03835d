# acrbuild - JavaEE Application Client archive builder
#
# Defines the class used to hold the context of a build
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
import os, sys, time, getpass, platform

from acrbuild.utils.buildexceptions import BuildException
from acrbuild.utils.consoleformatter import publishArtifact
from acrbuild.utils.interpolation import ObjectValueSource, EnvironmentValueSource

import logging
log = logging.getLogger('acrbuild.buildcontext')

DEFAULT_BUILD_TIMESTAMP_FORMAT = "yyyy-MM-dd'T'HH:mm:ss'Z'"

def getSystemProperties():
	"""
	Returns the equivalents of the standard Java system properties that builds commonly refer to, such as
	``user.home`` and ``os.name``.
	"""
	try:
		username = getpass.getuser()
	except Exception as e:
		log.debug('Failed to get user name: %s', e)
		username = ''
	return {
		'user.dir': os.getcwd(),
		'user.home': os.path.expanduser('~'),
		'user.name': username,
		'os.name': platform.system(),
		'os.arch': platform.machine(),
		'os.version': platform.release(),
		'file.separator': os.sep,
		'path.separator': os.pathsep,
		'line.separator': os.linesep,
		'python.version': '%s.%s.%s'%sys.version_info[:3],
	}

_JAVA_DATE_FIELDS = [('yyyy', '%Y'), ('yy', '%y'), ('MM', '%m'), ('dd', '%d'), ('HH', '%H'), ('mm', '%M'), ('ss', '%S')]

def formatTimestamp(javaFormat, timestamp):
	"""
	Format a UTC timestamp using a Java SimpleDateFormat-style pattern, supporting the common fields
	(yyyy, yy, MM, dd, HH, mm, ss, SSS) and quoted literals.

	>>> formatTimestamp(DEFAULT_BUILD_TIMESTAMP_FORMAT, 0)
	'1970-01-01T00:00:00Z'
	>>> formatTimestamp("yyyyMMdd-HHmm.SSS 'o''clock'", 1.5)
	"19700101-0000.500 o'clock"
	"""
	t = time.gmtime(timestamp)
	out = []
	for kind, token in _tokenize(javaFormat):
		if kind == 'literal':
			out.append(token)
		elif token == 'SSS':
			out.append('%03d'%int(round((timestamp % 1)*1000)))
		else:
			for java, python in _JAVA_DATE_FIELDS:
				if token == java:
					out.append(time.strftime(python, t))
					break
			else:
				raise BuildException('Unsupported date format field "%s" in "%s"'%(token, javaFormat))
	return ''.join(out)

def _tokenize(javaFormat):
	tokens = []
	i = 0
	while i < len(javaFormat):
		c = javaFormat[i]
		if c == "'":
			end = i+1
			literal = ''
			while end < len(javaFormat):
				if javaFormat[end] == "'":
					if javaFormat[end+1:end+2] == "'":
						literal += "'"
						end += 2
						continue
					break
				literal += javaFormat[end]
				end += 1
			tokens.append(('literal', literal if end > i+1 else "'"))
			i = end+1
		elif c.isalpha():
			end = i
			while end < len(javaFormat) and javaFormat[end] == c: end += 1
			tokens.append(('field', javaFormat[i:end]))
			i = end
		else:
			tokens.append(('literal', c))
			i += 1
	return tokens

_ESCAPED_EXPRESSION = '\x00escaped-expression\x00'

class BuildContext(object):
	""" Holds the state that is shared by everything executing in a single build: the user properties specified
	on the command line, the environment, the build start time and the resolved runtime classpath (if any).

	>>> BuildContext({'a':'b'}).getUserProperty('a')
	'b'
	>>> BuildContext({'a':'b'}).getUserProperty('c') is None
	True
	"""

	def __init__(self, userProperties=None, environ=None, startTime=None, runtimeClasspath=None):
		"""
		@param userProperties: a dictionary of property values specified by the user, e.g. on the command line.
		@param environ: the environment variables (defaults to os.environ).
		@param startTime: the build start time in seconds since the epoch (defaults to now).
		@param runtimeClasspath: a list of jar paths forming the project's resolved runtime classpath, or None if
		it has not been resolved.
		"""
		self._userProperties = dict(userProperties or {})
		self._environ = dict(os.environ if environ is None else environ)
		self.startTime = time.time() if startTime is None else startTime
		self.runtimeClasspath = runtimeClasspath

	def publishArtifact(self, displayName, path):
		""" Announce a file produced by the build, such as the archive, to the console formatters. """
		publishArtifact(displayName, path)

	def getUserProperty(self, name):
		""" Returns the value of a user property, or None if it was not specified. """
		return self._userProperties.get(name)

	def getUserProperties(self):
		""" Return a new copy of the user properties dictionary. """
		return self._userProperties.copy()

	def getEnvironment(self):
		""" Return a new copy of the environment variables used for ``env.*`` expressions. """
		return self._environ.copy()

	def getBuildTimestamp(self, project=None):
		""" Returns the value of ``maven.build.timestamp``, formatted using the project's
		``maven.build.timestamp.format`` property if set. """
		fmt = DEFAULT_BUILD_TIMESTAMP_FORMAT
		if project is not None:
			fmt = project.properties.get('maven.build.timestamp.format') or fmt
		return formatTimestamp(fmt, self.startTime)

	def getPropertyValue(self, name, project=None):
		""" Return the value of a property referenced by a ${...} expression, raising a BuildException if it is not defined.

		User properties take precedence, followed by the project model (``project.*``, ``pom.*``, ``basedir``),
		project properties, environment variables (``env.*``), ``maven.build.timestamp`` and system properties.

		>>> BuildContext({'A':'b'}).getPropertyValue('A')
		'b'
		>>> BuildContext({'A':'b'}).getPropertyValue('UNDEFINED_PROPERTY')
		Traceback (most recent call last):
		...
		acrbuild.utils.buildexceptions.BuildException: Property "UNDEFINED_PROPERTY" is not defined
		"""
		result = self._userProperties.get(name)
		if result is None and project is not None:
			if name == 'basedir':
				result = project.basedir
			if result is None:
				result = ObjectValueSource(['project.', 'pom.'], project).getValue(name)
			if result is None:
				result = project.properties.get(name)
		if result is None:
			result = EnvironmentValueSource(self._environ).getValue(name)
		if result is None and name == 'maven.build.timestamp':
			result = self.getBuildTimestamp(project)
		if result is None:
			result = getSystemProperties().get(name)
		if result is None:
			raise BuildException('Property "%s" is not defined'%name)
		return result

	def expandPropertyValues(self, string, project=None):
		""" Replace the ${name} expressions in a parameter or configuration value with the property values.

		Values are expanded recursively. A double dollar escapes an expression, so "$${foo}" gives a literal
		"${foo}"; the result must therefore not be expanded again. Boolean values become "true" or "false".

		@raise BuildException: if a property is undefined, refers to itself, or an expression is not closed.

		>>> BuildContext({'A':'b'}).expandPropertyValues(None)
		>>> BuildContext({'A':'b'}).expandPropertyValues('')
		''
		>>> BuildContext({'A':'a'}).expandPropertyValues('x${A}x$${A}x${A}x$$${A}x')
		'xax${A}xax$${A}x'
		>>> BuildContext({'A':'${B}/x', 'B':'b'}).expandPropertyValues('${A}')
		'b/x'
		>>> BuildContext({'A':'b'}).expandPropertyValues('${A')
		Traceback (most recent call last):
		...
		acrbuild.utils.buildexceptions.BuildException: Incorrectly formatted property string "${A"
		>>> BuildContext({'A':'${A}'}).expandPropertyValues('${A}')
		Traceback (most recent call last):
		...
		acrbuild.utils.buildexceptions.BuildException: Property "A" refers to itself: A -> A
		"""
		result = self.__expand(string, project, ())
		return result.replace(_ESCAPED_EXPRESSION, '${') if result else result

	def __expand(self, string, project, stack):
		if not string: return string
		if not isinstance(string, str): raise TypeError('Cannot expand properties in a value of type %s: %r'%(type(string).__name__, string))

		string = string.replace('$${', _ESCAPED_EXPRESSION)

		while '${' in string:
			start = string.find('${')
			end = string.find('}', start)
			if end == -1:
				raise BuildException('Incorrectly formatted property string "%s"'%string.replace(_ESCAPED_EXPRESSION, '$${'))
			propName = string[start+2:end]
			if propName in stack:
				raise BuildException('Property "%s" refers to itself: %s'%(stack[0], ' -> '.join(stack+(propName,))))
			v = self.getPropertyValue(propName, project)
			if isinstance(v, bool): v = str(v).lower()
			v = self.__expand(str(v), project, stack+(propName,))
			string = string[:start]+v+string[end+1:]

		return string
