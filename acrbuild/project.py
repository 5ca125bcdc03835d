# acrbuild - JavaEE Application Client archive builder
#
# The project model, read from a Maven pom.xml
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
Contains `Project`, the model of the project being archived, and `loadProject` which reads it from a ``pom.xml``.

Only the parts of the model used when building an application client archive are read: the coordinates,
descriptive elements, properties, build directories, filters and the configuration of the plugin.
"""

import os

from lxml import etree

from acrbuild.buildcommon import ACRBUILD_VERSION, compareVersions
from acrbuild.buildcontext import getSystemProperties
from acrbuild.utils.buildexceptions import BuildException, DependencyResolutionRequiredException
from acrbuild.utils.interpolation import Interpolator, MapValueSource, ObjectValueSource, EnvironmentValueSource

import logging
log = logging.getLogger('acrbuild.project')

PLUGIN_ARTIFACT_ID = 'maven-acr-plugin'

# configuration elements whose children form a list even when there is only one of them
_LIST_ELEMENTS = {'excludes', 'includes', 'filters', 'manifestSections', 'delimiters'}

class Artifact(object):
	""" The main artifact produced by a project. The file is set once the artifact has been built. """
	def __init__(self, groupId, artifactId, version, type):
		self.groupId, self.artifactId, self.version, self.type = groupId, artifactId, version, type
		self.file = None

	def __str__(self):
		return '%s:%s:%s:%s'%(self.groupId, self.artifactId, self.type, self.version)

	def __repr__(self):
		return 'Artifact<%s file=%s>'%(self, self.file)

class Build(object):
	""" The build section of the project model. """
	def __init__(self):
		self.directory = '${project.basedir}/target'
		self.outputDirectory = '${project.build.directory}/classes'
		self.finalName = '${project.artifactId}-${project.version}'
		self.outputTimestamp = ''
		self.filters = []

class Organization(object):
	def __init__(self, name=None, url=None):
		self.name, self.url = name, url

class Project(object):
	"""
	The model of a project.

	>>> p = Project('com.example', 'myclient', '1.0')
	>>> p.getId()
	'com.example:myclient:app-client:1.0'
	>>> p.getRuntimeClasspath()
	Traceback (most recent call last):
	...
	acrbuild.utils.buildexceptions.DependencyResolutionRequiredException: Attempted to access the runtime classpath of project com.example:myclient:app-client:1.0 before it was resolved
	"""
	def __init__(self, groupId, artifactId, version, packaging='app-client', basedir=None):
		self.groupId = groupId
		self.artifactId = artifactId
		self.version = version
		self.packaging = packaging
		self.name = None
		self.description = None
		self.url = None
		self.organization = Organization()
		self.basedir = os.path.abspath(basedir or '.')
		self.file = None
		self.properties = {}
		self.build = Build()
		self.pluginConfiguration = {}
		self.pluginVersion = None
		self.runtimeClasspath = None
		self.artifact = Artifact(groupId, artifactId, version, packaging)

	def getId(self):
		return '%s:%s:%s:%s'%(self.groupId, self.artifactId, self.packaging, self.version)

	def __str__(self):
		return self.getId()

	def __repr__(self):
		return 'Project<%s>'%self.getId()

	def getRuntimeClasspath(self):
		""" Returns the paths of the jars on the project's resolved runtime classpath.

		@raise DependencyResolutionRequiredException: if the classpath has not been resolved.
		"""
		if self.runtimeClasspath is None:
			raise DependencyResolutionRequiredException(self)
		return list(self.runtimeClasspath)

def _localName(element):
	return etree.QName(element).localname

def _children(element):
	# skip comments and processing instructions
	return [c for c in element if isinstance(c.tag, str)]

def _text(parent, name, default=None):
	if parent is None: return default
	node = parent.find('{*}'+name)
	if node is None or node.text is None or not node.text.strip():
		return default
	return node.text.strip()

def xmlToConfiguration(element):
	"""
	Convert a plugin ``<configuration>`` element into a structure of dictionaries, lists and strings.

	>>> xmlToConfiguration(etree.fromstring('<configuration><escapeString>\\\\</escapeString><excludes><exclude>a/**</exclude></excludes>'
	...    '<archive><manifestEntries><Built-By>me</Built-By></manifestEntries></archive></configuration>'))
	{'escapeString': '\\\\', 'excludes': ['a/**'], 'archive': {'manifestEntries': {'Built-By': 'me'}}}
	"""
	children = _children(element)
	if not children:
		return (element.text or '').strip()
	name = _localName(element)
	if name in _LIST_ELEMENTS or (len(children) > 1 and len(set(_localName(c) for c in children)) == 1):
		return [xmlToConfiguration(c) for c in children]
	return {_localName(c): xmlToConfiguration(c) for c in children}

def _findPlugin(build):
	if build is None: return None
	found = None
	for plugins in [build.find('{*}pluginManagement/{*}plugins'), build.find('{*}plugins')]:
		if plugins is None: continue
		for plugin in plugins.iterchildren('{*}plugin'):
			if _text(plugin, 'artifactId') == PLUGIN_ARTIFACT_ID:
				found = plugin # plugins override pluginManagement
	return found

def loadProject(pomPath, context):
	"""
	Read the project model from a ``pom.xml`` file.

	Parent groupId and version are inherited when not specified, the standard build defaults are applied
	(``target``, ``target/classes``, ``<artifactId>-<version>``), ``${...}`` expressions are expanded and
	relative build paths are resolved against the directory containing the pom.

	@param pomPath: the path of the pom.xml.
	@param context: the `acrbuild.buildcontext.BuildContext`, which supplies user properties and the resolved runtime
	classpath.
	"""
	pomPath = os.path.abspath(pomPath)
	if not os.path.isfile(pomPath):
		raise BuildException('Cannot find project file: %s'%pomPath)
	try:
		root = etree.parse(pomPath, etree.XMLParser(remove_comments=True)).getroot()
	except etree.XMLSyntaxError:
		raise BuildException('Failed to parse project file %s'%pomPath, causedBy=True)
	if _localName(root) != 'project':
		raise BuildException('%s is not a project descriptor: the root element is <%s>'%(pomPath, _localName(root)))

	parent = root.find('{*}parent')
	artifactId = _text(root, 'artifactId')
	if not artifactId:
		raise BuildException('%s does not specify an artifactId'%pomPath)
	groupId = _text(root, 'groupId', _text(parent, 'groupId'))
	version = _text(root, 'version', _text(parent, 'version'))
	if not groupId or not version:
		raise BuildException('%s must specify a groupId and version (directly or from its parent)'%pomPath)

	project = Project(groupId, artifactId, version, packaging=_text(root, 'packaging', 'jar'), basedir=os.path.dirname(pomPath))
	project.file = pomPath
	project.name = _text(root, 'name')
	project.description = _text(root, 'description')
	project.url = _text(root, 'url')
	project.organization = Organization(_text(root.find('{*}organization'), 'name'), _text(root.find('{*}organization'), 'url'))

	properties = root.find('{*}properties')
	if properties is not None:
		for p in _children(properties):
			project.properties[_localName(p)] = (p.text or '').strip()

	build = root.find('{*}build')
	project.build.directory = _text(build, 'directory', project.build.directory)
	project.build.outputDirectory = _text(build, 'outputDirectory', project.build.outputDirectory)
	project.build.finalName = _text(build, 'finalName', project.build.finalName)
	project.build.outputTimestamp = project.properties.get('project.build.outputTimestamp', '')
	if build is not None and build.find('{*}filters') is not None:
		project.build.filters = [(f.text or '').strip() for f in build.find('{*}filters').iterchildren('{*}filter') if (f.text or '').strip()]

	plugin = _findPlugin(build)
	if plugin is not None:
		project.pluginVersion = _text(plugin, 'version')
		configuration = plugin.find('{*}configuration')
		if configuration is not None:
			project.pluginConfiguration = xmlToConfiguration(configuration) or {}
			if not isinstance(project.pluginConfiguration, dict):
				raise BuildException('Invalid <configuration> for %s in %s'%(PLUGIN_ARTIFACT_ID, pomPath))
		if project.pluginVersion and compareVersions(ACRBUILD_VERSION, project.pluginVersion) < 0:
			log.warning('Project %s asks for %s version %s but this is acrbuild %s', project, PLUGIN_ARTIFACT_ID, project.pluginVersion, ACRBUILD_VERSION,
				extra={'acrbuild_filename': pomPath})

	_interpolateModel(project, context)

	project.runtimeClasspath = context.runtimeClasspath
	project.artifact = Artifact(project.groupId, project.artifactId, project.version, project.packaging)
	log.debug('Loaded project %s from %s', project, pomPath)
	return project

def _interpolateModel(project, context):
	interpolator = Interpolator([
			MapValueSource(context.getUserProperties()),
			MapValueSource({'basedir': project.basedir}),
			ObjectValueSource(['project.', 'pom.'], project),
			MapValueSource(project.properties),
			EnvironmentValueSource(context.getEnvironment()),
			MapValueSource(getSystemProperties()),
		], delimiters=['${*}'])

	for k in list(project.properties):
		project.properties[k] = interpolator.interpolate(project.properties[k])
	for attr in ['groupId', 'artifactId', 'version', 'name', 'description', 'url']:
		setattr(project, attr, interpolator.interpolate(getattr(project, attr)))
	b = project.build
	b.outputTimestamp = interpolator.interpolate(b.outputTimestamp)
	b.finalName = interpolator.interpolate(b.finalName)
	# directory first, since the others are usually defined relative to it
	for attr in ['directory', 'outputDirectory']:
		path = interpolator.interpolate(getattr(b, attr))
		if not os.path.isabs(path): path = os.path.join(project.basedir, path)
		setattr(b, attr, os.path.normpath(path))
	b.filters = [interpolator.interpolate(f) for f in b.filters]
