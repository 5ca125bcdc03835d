# acrbuild - JavaEE Application Client archive builder
#
# Builds the manifest and project descriptor entries of an archive and writes it
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
Contains `ProjectArchiver`, which adds a manifest and the project descriptor to a `acrbuild.utils.jar.JarArchiver`
and writes the archive, together with the `ArchiveConfiguration` that controls it.
"""

import os, re, sys, platform, calendar, datetime

from acrbuild.buildcommon import CREATED_BY, ACRBUILD_VERSION
from acrbuild.utils.buildexceptions import BuildException
from acrbuild.utils.manifest import Manifest, readManifest
from acrbuild.utils.fileutils import parsePropertiesFile
from acrbuild.utils.jar import DUPLICATES_SKIP, DUPLICATES_FAIL

import logging
log = logging.getLogger('acrbuild.archiver')

# the earliest time a zip entry can hold (with 2 second precision), and the latest accepted
MIN_REPRODUCIBLE_TIMESTAMP = calendar.timegm((1980, 1, 1, 0, 0, 2))
MAX_REPRODUCIBLE_TIMESTAMP = calendar.timegm((2099, 12, 31, 23, 59, 59))

_ISO8601 = re.compile(r'(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2})(?::(\d{2})(?:\.\d+)?)?(Z|[+-]\d{2}:?\d{2})\Z')

def parseOutputTimestamp(outputTimestamp):
	"""
	Parse the timestamp used for reproducible archive entries.

	@param outputTimestamp: either seconds since the epoch, or an ISO 8601 date-time with an offset such as
	``2019-10-05T18:37:42Z``, in which the seconds and fraction are optional. None, an empty string or a single
	non-digit character (e.g. ``-``) disable reproducible timestamps.

	@return: seconds since the epoch, or None if reproducible timestamps are disabled.

	>>> parseOutputTimestamp('1570300662')
	1570300662
	>>> parseOutputTimestamp('2019-10-05T18:37:42Z')
	1570300662
	>>> parseOutputTimestamp('2019-10-05T20:37:42.123+02:00')
	1570300662
	>>> parseOutputTimestamp('2019-10-05T18:37Z')
	1570300620
	>>> parseOutputTimestamp('') is None, parseOutputTimestamp(None) is None, parseOutputTimestamp('-') is None
	(True, True, True)
	>>> parseOutputTimestamp('2019-10-05 18:37:42')
	Traceback (most recent call last):
	...
	acrbuild.utils.buildexceptions.BuildException: Invalid project.build.outputTimestamp value '2019-10-05 18:37:42'
	>>> parseOutputTimestamp('1979-12-31T23:59:59Z')
	Traceback (most recent call last):
	...
	acrbuild.utils.buildexceptions.BuildException: '1979-12-31T23:59:59Z' is not within the valid range 1980-01-01T00:00:02Z to 2099-12-31T23:59:59Z
	"""
	if not outputTimestamp or (len(outputTimestamp) == 1 and not outputTimestamp.isdigit()):
		return None
	outputTimestamp = outputTimestamp.strip()

	if outputTimestamp.isdigit():
		result = int(outputTimestamp)
	else:
		m = _ISO8601.match(outputTimestamp)
		if not m:
			raise BuildException("Invalid project.build.outputTimestamp value '%s'"%outputTimestamp)
		offset = m.group(7)
		if offset == 'Z':
			tz = datetime.timezone.utc
		else:
			sign = -1 if offset[0] == '-' else 1
			offset = offset[1:].replace(':', '')
			tz = datetime.timezone(sign*datetime.timedelta(hours=int(offset[:2]), minutes=int(offset[2:])))
		try:
			dt = datetime.datetime(*[int(x or 0) for x in m.groups()[:6]], tzinfo=tz)
		except ValueError:
			raise BuildException("Invalid project.build.outputTimestamp value '%s'"%outputTimestamp, causedBy=True)
		result = calendar.timegm(dt.utctimetuple())

	if result < MIN_REPRODUCIBLE_TIMESTAMP or result > MAX_REPRODUCIBLE_TIMESTAMP:
		raise BuildException("'%s' is not within the valid range 1980-01-01T00:00:02Z to 2099-12-31T23:59:59Z"%outputTimestamp)
	return result

def _parseBoolean(name, value):
	if isinstance(value, bool) or value is None: return value
	if value.strip().lower() == 'true': return True
	if value.strip().lower() in ['false', '']: return False
	raise BuildException('Invalid value for archive configuration "%s" - must be true or false: "%s"'%(name, value))

class ManifestConfiguration(object):
	""" The ``<manifest>`` element of the archive configuration. """
	def __init__(self):
		self.mainClass = None
		self.addClasspath = False
		self.classpathPrefix = ''
		self.addDefaultEntries = True
		self.addDefaultImplementationEntries = False
		self.addDefaultSpecificationEntries = False
		self.addBuildEnvironmentEntries = False

	def __repr__(self):
		return 'ManifestConfiguration%s'%self.__dict__

class ManifestSection(object):
	""" A named section to add to the manifest. An empty entry value removes that entry. """
	def __init__(self, name, manifestEntries=None):
		self.name = name
		self.manifestEntries = dict(manifestEntries or {})

class ArchiveConfiguration(object):
	"""
	The ``<archive>`` configuration, which controls the manifest and other generated content of an archive.

	>>> c = ArchiveConfiguration.fromConfiguration({'compress':'false', 'manifest':{'mainClass':'a.Main', 'addClasspath':'true'},
	...    'manifestEntries':{'Built-By':'', 'Sealed':'true'}, 'manifestSections':[{'name':'a/', 'manifestEntries':{'X':'y'}}]})
	>>> c.compress, c.forced, c.manifest.mainClass, c.manifest.addClasspath
	(False, True, 'a.Main', True)
	>>> c.manifestEntries, c.manifestSections[0].name
	({'Built-By': '', 'Sealed': 'true'}, 'a/')
	>>> c.duplicateBehavior, ArchiveConfiguration.fromConfiguration({'duplicateBehavior':'fail'}).duplicateBehavior
	('skip', 'fail')
	"""
	def __init__(self):
		self.compress = True
		self.forced = True
		self.addMavenDescriptor = True
		self.manifestFile = None
		self.manifest = ManifestConfiguration()
		self.manifestEntries = {}
		self.manifestSections = []
		self.pomPropertiesFile = None
		self.duplicateBehavior = DUPLICATES_SKIP

	@staticmethod
	def fromConfiguration(configuration, basedir=None):
		"""
		Create an ArchiveConfiguration from the dictionary read from the ``<archive>`` element of a pom.

		@param configuration: the dictionary, or None for the defaults. An ArchiveConfiguration is returned unchanged.
		@param basedir: the directory that relative manifestFile and pomPropertiesFile paths are resolved against.
		"""
		if isinstance(configuration, ArchiveConfiguration): return configuration
		result = ArchiveConfiguration()
		if not configuration: return result
		if not isinstance(configuration, dict):
			raise BuildException('Invalid archive configuration: %r'%(configuration,))

		def path(p):
			if not p: return None
			return os.path.normpath(os.path.join(basedir or '.', p))

		for key, value in configuration.items():
			if key in ['compress', 'forced', 'addMavenDescriptor']:
				setattr(result, key, _parseBoolean(key, value))
			elif key in ['manifestFile', 'pomPropertiesFile']:
				setattr(result, key, path(value))
			elif key == 'duplicateBehavior':
				if (value or DUPLICATES_SKIP) not in [DUPLICATES_SKIP, DUPLICATES_FAIL]:
					raise BuildException('Invalid value for archive configuration "duplicateBehavior" - must be %s or %s: "%s"'%(DUPLICATES_SKIP, DUPLICATES_FAIL, value))
				result.duplicateBehavior = value or DUPLICATES_SKIP
			elif key == 'manifest':
				for mkey, mvalue in (value or {}).items():
					if not hasattr(result.manifest, mkey):
						log.warning('Ignoring unsupported archive manifest configuration: "%s"', mkey)
					elif mkey in ['mainClass', 'classpathPrefix']:
						setattr(result.manifest, mkey, mvalue or ('' if mkey == 'classpathPrefix' else None))
					else:
						setattr(result.manifest, mkey, _parseBoolean(mkey, mvalue))
			elif key == 'manifestEntries':
				result.manifestEntries = dict(value or {})
			elif key == 'manifestSections':
				for section in value or []:
					if not isinstance(section, dict) or not section.get('name'):
						raise BuildException('Each archive manifestSection must have a name')
					result.manifestSections.append(ManifestSection(section['name'], section.get('manifestEntries')))
			else:
				log.warning('Ignoring unsupported archive configuration: "%s"', key)
		return result

class ProjectArchiver(object):
	"""
	Writes the archive for a project: a manifest generated from the `ArchiveConfiguration`, the project descriptor
	under ``META-INF/maven/``, and whatever has been added to the underlying jar archiver.
	"""
	def __init__(self):
		self.archiver = None
		self.outputFile = None
		self.createdBy = CREATED_BY

	def setArchiver(self, archiver):
		self.archiver = archiver

	def getArchiver(self):
		return self.archiver

	def setOutputFile(self, outputFile):
		self.outputFile = outputFile

	def setCreatedBy(self, createdBy):
		self.createdBy = createdBy

	def configureReproducible(self, outputTimestamp):
		"""
		Configure the archiver to use the same timestamp and permissions for every entry, so that the archive depends
		only on its contents.

		@param outputTimestamp: see `parseOutputTimestamp`.
		@return: the parsed timestamp, or None if not reproducible.
		"""
		timestamp = parseOutputTimestamp(outputTimestamp)
		self.archiver.configureReproducible(timestamp)
		return timestamp

	def getManifest(self, context, project, config):
		""" Create the manifest for the project.

		@raise DependencyResolutionRequiredException: if a Class-Path is requested but the runtime classpath has not been resolved.
		@raise ManifestException: if an entry is invalid.
		@raise OSError: if the manifestFile cannot be read.
		"""
		manifest = Manifest()
		main = manifest.mainAttributes
		mc = config.manifest

		if mc.addDefaultEntries:
			main['Created-By'] = self.createdBy
		if mc.addBuildEnvironmentEntries:
			main['Build-Tool'] = 'acrbuild %s'%ACRBUILD_VERSION
			main['Build-Python'] = '%s %s.%s.%s'%((platform.python_implementation(),)+tuple(sys.version_info[:3]))
			main['Build-Os'] = '%s (%s; %s)'%(platform.system(), platform.release(), platform.machine())
		if mc.addClasspath:
			classpath = [mc.classpathPrefix+os.path.basename(p) for p in project.getRuntimeClasspath() if os.path.splitext(p)[1].lower() in ['.jar', '.zip']]
			if classpath:
				main['Class-Path'] = ' '.join(classpath)
		if mc.mainClass:
			main['Main-Class'] = mc.mainClass

		vendor = project.organization.name if project.organization else None
		if mc.addDefaultSpecificationEntries:
			if project.name: main['Specification-Title'] = project.name
			main['Specification-Version'] = '.'.join(re.split(r'[.-]', project.version)[:2])
			if vendor: main['Specification-Vendor'] = vendor
		if mc.addDefaultImplementationEntries:
			if project.name: main['Implementation-Title'] = project.name
			main['Implementation-Version'] = project.version
			if vendor: main['Implementation-Vendor'] = vendor

		for key, value in config.manifestEntries.items():
			if value is None or value == '':
				main.pop(key)
			else:
				main[key] = value

		for section in config.manifestSections:
			attributes = manifest.getSection(section.name)
			for key, value in section.manifestEntries.items():
				if value is None or value == '':
					attributes.pop(key)
				else:
					attributes[key] = value

		if config.manifestFile:
			log.info('Reading manifest from %s', config.manifestFile)
			result = readManifest(config.manifestFile)
			result.merge(manifest)
			manifest = result
		return manifest

	def getPomProperties(self, project, config):
		""" Returns the contents of the ``pom.properties`` descriptor entry as bytes. """
		properties = {}
		if config.pomPropertiesFile:
			with open(config.pomPropertiesFile, 'r', encoding='iso-8859-1') as f:
				properties.update((k, v) for (k, v, _) in parsePropertiesFile(f))
		properties.update({'groupId': project.groupId, 'artifactId': project.artifactId, 'version': project.version})
		return ''.join('%s=%s\n'%(k, properties[k].replace('\\', '\\\\')) for k in sorted(properties)).encode('iso-8859-1', errors='backslashreplace')

	def createArchive(self, context, project, config):
		"""
		Write the archive.

		@param context: the `acrbuild.buildcontext.BuildContext`.
		@param project: the `acrbuild.project.Project`.
		@param config: the `ArchiveConfiguration`.
		@raise ArchiverException: if the archive cannot be written.
		@raise ManifestException: if the manifest cannot be created.
		@raise DependencyResolutionRequiredException: if the manifest needs an unresolved classpath.
		@raise OSError: for I/O problems.
		"""
		archiver = self.archiver
		archiver.compress = config.compress
		archiver.forced = config.forced
		archiver.duplicateBehavior = config.duplicateBehavior

		if config.addMavenDescriptor:
			prefix = 'META-INF/maven/%s/%s/'%(project.groupId, project.artifactId)
			if project.file and os.path.isfile(project.file):
				archiver.addFile(project.file, prefix+'pom.xml')
			archiver.addBytes(prefix+'pom.properties', self.getPomProperties(project, config))

		archiver.setManifest(self.getManifest(context, project, config))
		archiver.setDestFile(self.outputFile)
		return archiver.createArchive()
