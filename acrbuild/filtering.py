# acrbuild - JavaEE Application Client archive builder
#
# Resource filtering: copying text files while replacing ${...} and @...@ expressions
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
Contains `FileFilter`, which copies files while expanding expressions using a list of filter wrappers (see
`FileContentsMapper`), and `getXmlEncoding` for detecting the encoding of an XML file.

The values available to the default filter wrappers are, highest precedence first:

	- project properties and user properties (user properties win);
	- the properties in the filter files, in the order the files are listed;
	- the project model (``project.*``, ``pom.*``, ``basedir``);
	- environment variables (``env.*``);
	- ``maven.build.timestamp``;
	- system properties such as ``user.home``.
"""

import os, codecs, shutil

from lxml import etree

from acrbuild.buildcontext import getSystemProperties
from acrbuild.utils.buildexceptions import FilteringException
from acrbuild.utils.fileutils import parsePropertiesFile, mkdir, openForWrite, normLongPath
from acrbuild.utils.flatten import getStringList
from acrbuild.utils.interpolation import (Interpolator, MapValueSource, ObjectValueSource, EnvironmentValueSource,
	DEFAULT_DELIMITERS, escapeWindowsPath)

import logging
log = logging.getLogger('acrbuild.filtering')

DEFAULT_ENCODING = 'UTF-8'

class ResourcesExecution(object):
	"""
	Settings that control how expressions are expanded when filtering.

	@param escapeString: if set, an expression immediately preceded by this string is copied literally (without the
	escape string) rather than expanded, e.g. ``\\${foo}`` gives ``${foo}``.

	@param delimiters: the expression delimiters; ``${*}`` means expressions begin with ``${`` and end with ``}``,
	while ``@`` means expressions both begin and end with ``@``.
	"""
	def __init__(self, escapeString=None, delimiters=None):
		self.escapeString = escapeString or None
		self.delimiters = list(DEFAULT_DELIMITERS if delimiters is None else delimiters)

	def __repr__(self):
		return 'ResourcesExecution(escapeString=%r, delimiters=%s)'%(self.escapeString, self.delimiters)

class FileContentsMapper(object):
	""" A base class for mappers that take part in text file transformation for use with `FileFilter.copyFile`.

	Files are read and written as text in the encoding passed to copyFile, without universal newline
	translation, so line endings are preserved.
	"""

	def getInstance(self):
		""" Returns the FileContentsMapper instance that will be used for a copy; since most instances are
		inherently stateless, by default just returns self.
		"""
		return self
	def prepare(self, context, **kwargs):
		""" Called before any other method on this mapper (other than getInstance) to allow the mapper to
		initialize its internal variables using the build context.
		"""
		pass
	def mapLine(self, context, line):
		""" Called for every line in the file, returning the original line, a changed line, or None if the line should be deleted.
		"""
		raise NotImplementedError('Not implemented yet')
	def getDescription(self, context):
		""" Returns a string description of the transformation, for logging. """
		raise NotImplementedError('Not implemented yet')

class InterpolationMapper(FileContentsMapper):
	""" Expands the expressions in each line using an `acrbuild.utils.interpolation.Interpolator`. """
	def __init__(self, interpolator, description):
		self.interpolator = interpolator
		self.description = description
	def mapLine(self, context, line):
		return self.interpolator.interpolate(line)
	def getDescription(self, context):
		return 'InterpolationMapper(%s)'%self.description

def loadFilterFile(path, baseProperties):
	"""
	Read a filter (``.properties``) file. Values may refer to the base properties and to properties defined
	earlier in the same file.

	@return: an ordered dictionary of the properties defined in the file.
	"""
	if not os.path.isfile(path):
		raise FilteringException('Error loading property file "%s": file not found'%path)
	try:
		with open(normLongPath(path), 'r', encoding='iso-8859-1') as f:
			lines = parsePropertiesFile(f)
	except OSError:
		raise FilteringException('Error loading property file "%s"'%path, causedBy=True)

	result = {}
	interpolator = Interpolator([MapValueSource(result), MapValueSource(baseProperties)], delimiters=['${*}'])
	for (key, value, lineno) in lines:
		result[key] = value
	for key in result:
		result[key] = interpolator.interpolate(result[key])
	return result

class FileFilter(object):
	"""
	Copies files, optionally applying filter wrappers to their contents.
	"""

	def getDefaultFilterWrappers(self, project, filters, escapeWindowsPaths, context, execution):
		"""
		Create the standard filter wrappers for a project.

		@param project: the `acrbuild.project.Project` whose model and properties are available for expansion.
		@param filters: a list of filter (``.properties``) files, relative to the project base directory.
		@param escapeWindowsPaths: if True, double the backslashes of expanded values that look like Windows paths.
		@param context: the `acrbuild.buildcontext.BuildContext`.
		@param execution: the `ResourcesExecution` supplying the escape string and delimiters.
		@return: a list of `FileContentsMapper` instances.
		"""
		baseProperties = dict(project.properties)
		baseProperties.update(context.getUserProperties())

		filterProperties = {}
		for f in getStringList(filters):
			f = context.expandPropertyValues(f, project)
			if not os.path.isabs(f): f = os.path.join(project.basedir, f)
			log.debug('Loading filter file: %s', f)
			# each file can refer to values from the files before it
			knownProperties = dict(filterProperties)
			knownProperties.update(baseProperties)
			filterProperties.update(loadFilterFile(f, knownProperties))

		# project and user properties always win over filter files
		filterProperties.update(baseProperties)

		valueSources = [
			MapValueSource(filterProperties),
			MapValueSource({'basedir': project.basedir}),
			ObjectValueSource(['project.', 'pom.'], project),
			EnvironmentValueSource(context.getEnvironment()),
			MapValueSource({'maven.build.timestamp': context.getBuildTimestamp(project)}),
			MapValueSource(getSystemProperties()),
		]

		postProcessor = (lambda expression, value: escapeWindowsPath(value)) if escapeWindowsPaths else None
		interpolator = Interpolator(valueSources, delimiters=execution.delimiters,
			escapeString=execution.escapeString, postProcessor=postProcessor)
		return [InterpolationMapper(interpolator, '%s, filters=%s, %s'%(project, getStringList(filters), execution))]

	def copyFile(self, src, dest, filtering, filterWrappers, encoding, context=None):
		"""
		Copy a file, applying the filter wrappers to each line if filtering is enabled.

		@param src: the source file.
		@param dest: the destination file; may be the same path the source was copied from.
		@param filtering: if False, the file is copied byte for byte.
		@param filterWrappers: the list of `FileContentsMapper` to apply.
		@param encoding: the encoding of the source file, which is also used for the destination.
		"""
		try:
			mkdir(os.path.dirname(os.path.abspath(dest)))
			if not filtering or not filterWrappers:
				log.debug('Copying %s to %s', src, dest)
				with open(normLongPath(src), 'rb') as inp:
					with openForWrite(normLongPath(dest), 'wb') as out:
						shutil.copyfileobj(inp, out)
				return

			encoding = encoding or DEFAULT_ENCODING
			try:
				codecs.lookup(encoding)
			except LookupError:
				raise FilteringException('Unsupported encoding "%s" for %s'%(encoding, src))

			mappers = [m.getInstance() for m in filterWrappers]
			for m in mappers: m.prepare(context)
			log.debug('Filtering %s to %s using encoding %s and %s', src, dest, encoding, [m.getDescription(context) for m in mappers])

			with open(normLongPath(src), 'r', encoding=encoding, newline='') as s:
				# newline: preserve the line endings of the original file
				with openForWrite(normLongPath(dest), 'w', encoding=encoding, newline='') as d:
					for l in s:
						for m in mappers:
							l = m.mapLine(context, l)
							if l is None:
								break
						if l is not None:
							d.write(l)
		except FilteringException:
			raise
		except Exception as ex:
			exceptionsuffix = ''
			if isinstance(ex, UnicodeError):
				exceptionsuffix = ' due to an encoding problem (using %s)'%encoding
			raise FilteringException('Failed to copy %s to %s%s'%(src, dest, exceptionsuffix), causedBy=True)

def getXmlEncoding(path):
	"""
	Returns the encoding of an XML file, as given by its byte order mark or XML declaration, or UTF-8 if it
	specifies neither.

	@param path: the XML file.
	"""
	try:
		tree = etree.parse(path, etree.XMLParser(recover=True, resolve_entities=False, no_network=True))
	except (OSError, etree.XMLSyntaxError) as e:
		log.debug('Cannot determine the encoding of %s so assuming %s: %s', path, DEFAULT_ENCODING, e)
		return DEFAULT_ENCODING
	return tree.docinfo.encoding or DEFAULT_ENCODING
