# acrbuild - JavaEE Application Client archive builder
#
# Target that packages a JavaEE Application Client module
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
Contains `AppClientJar`, the target that packages the compiled classes and resources of a project into a JavaEE
Application Client archive (``<finalName>.jar``), optionally filtering the ``META-INF/application-client.xml``
deployment descriptor first.

The target is configured by the ``<configuration>`` of the ``maven-acr-plugin`` in the project's pom, by user
properties and by the ``configuration`` dictionary passed to the constructor; see `PARAMETERS`.
"""

import os

from acrbuild.archiver import ProjectArchiver, ArchiveConfiguration
from acrbuild.buildcommon import CREATED_BY
from acrbuild.filtering import FileFilter, ResourcesExecution, getXmlEncoding
from acrbuild.propertysupport import ParameterSet
from acrbuild.utils.buildexceptions import (AcrExecutionException, ArchiverException, ManifestException,
	FilteringException, DependencyResolutionRequiredException)
from acrbuild.utils.fileutils import copyFile, deleteFile
from acrbuild.utils.jar import JarArchiver

import logging
log = logging.getLogger('acrbuild.targets.appclient')

APP_CLIENT_XML = 'META-INF/application-client.xml'

DEFAULT_INCLUDES = ['**/**']

DEFAULT_EXCLUDES = [APP_CLIENT_XML]

PARAMETERS = ParameterSet('AppClientJar')
PARAMETERS.definePathParameter('basedir', '${project.build.directory}', readonly=True, required=True)
PARAMETERS.definePathParameter('outputDirectory', '${project.build.outputDirectory}',
	property='maven.acr.outputDirectory', legacyProperties=['outputDirectory'], required=True)
PARAMETERS.defineStringParameter('jarName', '${project.build.finalName}', required=True)
PARAMETERS.defineListParameter('excludes')
PARAMETERS.defineObjectParameter('archive')
PARAMETERS.defineBooleanParameter('escapeBackslashesInFilePath', False,
	property='maven.acr.escapeBackslashesInFilePath', legacyProperties=['acr.escapeBackslashesInFilePath'])
PARAMETERS.defineStringParameter('escapeString', None,
	property='maven.acr.escapeString', legacyProperties=['acr.escapeString'])
PARAMETERS.defineBooleanParameter('filterDeploymentDescriptor', False,
	property='maven.acr.filterDeploymentDescriptor', legacyProperties=['acr.filterDeploymentDescriptor'])
PARAMETERS.defineListParameter('filters')
PARAMETERS.defineStringParameter('outputTimestamp', '${project.build.outputTimestamp}')

def getMainJarExcludes(excludes):
	"""
	Returns the exclude patterns for the content of the archive. The deployment descriptor is always excluded,
	since it is added separately (after any filtering).

	>>> getMainJarExcludes(None)
	['META-INF/application-client.xml']
	>>> userExcludes = ['**/*DevOnly.class']
	>>> getMainJarExcludes(userExcludes), userExcludes
	(['**/*DevOnly.class', 'META-INF/application-client.xml'], ['**/*DevOnly.class'])
	"""
	if not excludes:
		return list(DEFAULT_EXCLUDES)
	return list(excludes)+[APP_CLIENT_XML]

def getAppClientJarFile(basedir, jarName):
	""" Returns the path of the archive to generate. """
	return os.path.join(basedir, jarName+'.jar')

def _expandConfiguration(context, project, value):
	if isinstance(value, str):
		return context.expandPropertyValues(value, project)
	if isinstance(value, dict):
		return {k: _expandConfiguration(context, project, v) for k, v in value.items()}
	if isinstance(value, list):
		return [_expandConfiguration(context, project, v) for v in value]
	return value

class AppClientJar(object):
	""" Target that creates a JavaEE Application Client archive from a project's output directory.
	"""

	def __init__(self, configuration=None):
		"""
		@param configuration: a dictionary of parameter values which override those from the project's plugin
		configuration, e.g. ``{'filterDeploymentDescriptor':True}``.
		"""
		self.configuration = dict(configuration or {})
		self.fileFilter = FileFilter()

	def __repr__(self):
		return 'AppClientJar(%s)'%self.configuration

	def getParameters(self, context, project):
		""" Returns a dictionary of the resolved value of every parameter. """
		configuration = dict(project.pluginConfiguration or {})
		configuration.update(self.configuration)
		return PARAMETERS.resolve(context, project, configuration)

	def run(self, context, project):
		"""
		Build the archive and set it as the project's artifact file.

		@param context: the `acrbuild.buildcontext.BuildContext`.
		@param project: the `acrbuild.project.Project`.
		@return: the path of the archive.
		@raise AcrExecutionException: if the archive could not be built.
		"""
		params = self.getParameters(context, project)
		jarName = params['jarName']
		outputDirectory = params['outputDirectory']

		log.info('Building JavaEE Application client: %s', jarName)

		jarFile = getAppClientJarFile(params['basedir'], jarName)

		archiver = ProjectArchiver()
		archiver.setArchiver(JarArchiver())
		archiver.setCreatedBy(CREATED_BY)
		archiver.setOutputFile(jarFile)

		archiver.configureReproducible(params['outputTimestamp'])

		try:
			archive = ArchiveConfiguration.fromConfiguration(_expandConfiguration(context, project, params['archive']), project.basedir)

			if os.path.exists(outputDirectory):
				archiver.getArchiver().addDirectory(outputDirectory, DEFAULT_INCLUDES, getMainJarExcludes(params['excludes']))
			else:
				log.info('JAR will only contain the META-INF/application-client.xml as no content was marked for inclusion')

			deploymentDescriptor = os.path.join(outputDirectory, *APP_CLIENT_XML.split('/'))

			if os.path.exists(deploymentDescriptor):
				if params['filterDeploymentDescriptor']:
					log.debug('Filtering deployment descriptor.')
					self.filterDeploymentDescriptor(context, project, deploymentDescriptor, params)
				archiver.getArchiver().addFile(deploymentDescriptor, APP_CLIENT_XML)

			archiver.createArchive(context, project, archive)
		except ArchiverException as e:
			raise AcrExecutionException('There was a problem creating the JavaEE Application Client archive: %s'%e.getMessage(), causedBy=True)
		except ManifestException as e:
			raise AcrExecutionException('There was a problem reading / creating the manifest for the JavaEE Application Client archive: %s'%e.getMessage(), causedBy=True)
		except OSError as e:
			raise AcrExecutionException('There was a I/O problem creating the JavaEE Application Client archive: %s'%e, causedBy=True)
		except DependencyResolutionRequiredException as e:
			raise AcrExecutionException('There was a problem resolving dependencies while creating the JavaEE Application Client archive: %s'%e.getMessage(), causedBy=True)
		except FilteringException as e:
			raise AcrExecutionException('There was a problem filtering the deployment descriptor: %s'%e.getMessage(), causedBy=True)

		project.artifact.file = jarFile
		context.publishArtifact('JavaEE Application Client archive', jarFile)
		return jarFile

	def filterDeploymentDescriptor(self, context, project, deploymentDescriptor, params):
		"""
		Expand the expressions in the deployment descriptor in place, by way of a temporary ``.unfiltered`` copy
		that is removed afterwards. If filtering fails the descriptor is restored to its original content.
		"""
		execution = ResourcesExecution(escapeString=params['escapeString'])
		filterWrappers = self.fileFilter.getDefaultFilterWrappers(project, params['filters'],
			params['escapeBackslashesInFilePath'], context, execution)

		unfiltered = deploymentDescriptor+'.unfiltered'
		copyFile(deploymentDescriptor, unfiltered)
		try:
			try:
				self.fileFilter.copyFile(unfiltered, deploymentDescriptor, True, filterWrappers,
					getXmlEncoding(unfiltered), context=context)
			except Exception:
				copyFile(unfiltered, deploymentDescriptor)
				raise
		finally:
			deleteFile(unfiltered)
