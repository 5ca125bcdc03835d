# acrbuild - JavaEE Application Client archive builder
#
# Definition and resolution of the configurable parameters of a build step
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
Defines the parameters of a build step and resolves their values.

Each parameter's value comes from the first of these that is set:

	- the plugin ``<configuration>`` in the pom (or a value passed in programmatically);
	- the user property named by the parameter (e.g. ``-Dmaven.acr.escapeString=\\``), or one of its deprecated
	  aliases, which produce a warning;
	- the parameter's default expression, e.g. ``${project.build.directory}``.

String values have ``${...}`` expressions expanded against the build context and project.
"""

import os

from acrbuild.utils.buildexceptions import BuildException
from acrbuild.utils.flatten import getStringList

import logging
log = logging.getLogger('acrbuild.propertysupport')

class Parameter(object):
	""" A single parameter definition. Use the define* methods of `ParameterSet` rather than constructing directly.
	"""
	def __init__(self, name, default, coerceToValidValue, property=None, legacyProperties=None, readonly=False, required=False):
		self.name = name
		self.default = default
		self.coerceToValidValue = coerceToValidValue
		self.property = property
		self.legacyProperties = legacyProperties or []
		self.readonly = readonly
		self.required = required

	def __repr__(self):
		return 'Parameter<%s>'%self.name

class ParameterSet(object):
	"""
	The collection of parameters accepted by a build step.

	>>> from acrbuild.buildcontext import BuildContext
	>>> p = ParameterSet('test')
	>>> p.defineStringParameter('name', default='${A}-x', property='test.name')
	>>> p.defineBooleanParameter('flag', property='test.flag', legacyProperties=['flag'])
	>>> sorted(p.resolve(BuildContext({'A':'a'}), None, {}).items())
	[('flag', False), ('name', 'a-x')]
	>>> sorted(p.resolve(BuildContext({'test.name':'n', 'flag':'TRUE'}), None, {}).items())
	[('flag', True), ('name', 'n')]
	>>> p.resolve(BuildContext({'test.name':'n'}), None, {'name':'c', 'flag':'yes'})
	Traceback (most recent call last):
	...
	acrbuild.utils.buildexceptions.BuildException: Invalid value for parameter "flag" - must be true or false: "yes"
	"""
	def __init__(self, owner):
		""" @param owner: a display name for the build step these parameters belong to. """
		self.owner = owner
		self.parameters = []

	def __define(self, parameter):
		assert parameter.name not in [p.name for p in self.parameters], 'Duplicate parameter: %s'%parameter.name
		self.parameters.append(parameter)

	def defineStringParameter(self, name, default=None, **kwargs):
		""" Define a string parameter. The default can contain ${...} expressions. """
		def _coerceToValidValue(context, project, value):
			if value is None: return None
			return context.expandPropertyValues(str(value), project)
		self.__define(Parameter(name, default, _coerceToValidValue, **kwargs))

	def definePathParameter(self, name, default=None, **kwargs):
		""" Define a parameter that will be converted to an absolute, normalized path, resolved relative to the
		project's base directory. """
		def _coerceToValidValue(context, project, value):
			if value is None: return None
			value = context.expandPropertyValues(str(value), project)
			if not os.path.isabs(value) and project is not None:
				value = os.path.join(project.basedir, value)
			return os.path.normpath(os.path.abspath(value))
		self.__define(Parameter(name, default, _coerceToValidValue, **kwargs))

	def defineBooleanParameter(self, name, default=False, **kwargs):
		""" Defines a boolean parameter that will have a True or False value. """
		def _coerceToValidValue(context, project, value):
			if isinstance(value, bool): return value
			if value is None: return False
			value = context.expandPropertyValues(str(value), project).strip()
			if value.lower() == 'true':
				return True
			if value.lower() == 'false' or value=='':
				return False
			raise BuildException('Invalid value for parameter "%s" - must be true or false: "%s"' % (name, value))
		self.__define(Parameter(name, default, _coerceToValidValue, **kwargs))

	def defineListParameter(self, name, default=None, **kwargs):
		""" Defines a parameter holding a list of strings. A string value is split on commas. """
		def _coerceToValidValue(context, project, value):
			if value is None: return None
			try:
				values = getStringList(value)
			except ValueError as e:
				raise BuildException('Invalid value for parameter "%s": %s'%(name, e))
			return [context.expandPropertyValues(v, project) for v in values]
		self.__define(Parameter(name, default, _coerceToValidValue, **kwargs))

	def defineObjectParameter(self, name, default=None, **kwargs):
		""" Defines a parameter whose (structured) value is passed through unchanged, e.g. the archive configuration. """
		self.__define(Parameter(name, default, lambda context, project, value: value, **kwargs))

	def resolve(self, context, project, configuration):
		"""
		Determine the value of every parameter.

		@param context: the `acrbuild.buildcontext.BuildContext`.
		@param project: the `acrbuild.project.Project`, or None.
		@param configuration: a dictionary of explicitly configured values.
		@return: a dictionary of parameter name to value.
		"""
		configuration = dict(configuration or {})
		result = {}
		for p in self.parameters:
			value = None
			if p.name in configuration and configuration[p.name] is not None:
				if p.readonly:
					log.warning('Parameter "%s" of %s is read-only and cannot be configured; ignoring the configured value "%s"', p.name, self.owner, configuration[p.name])
				else:
					value = configuration.pop(p.name)
			if value is None and p.property:
				value = context.getUserProperty(p.property)
			if value is None:
				for legacy in p.legacyProperties:
					value = context.getUserProperty(legacy)
					if value is not None:
						log.warning('The property "%s" is deprecated, please use "%s" instead', legacy, p.property)
						break
			if value is None:
				value = p.default
			value = p.coerceToValidValue(context, project, value)
			if value is None and p.required:
				raise BuildException('The parameter "%s" of %s is required but has not been set'%(p.name, self.owner))
			log.debug('Parameter %s = %r', p.name, value)
			result[p.name] = value

		for unknown in configuration:
			if unknown not in result:
				log.warning('Ignoring unknown configuration parameter for %s: "%s"', self.owner, unknown)
		return result
