# acrbuild - JavaEE Application Client archive builder
#
# Handlers for formatting stdout
#
# Copyright (c) 2015 - 2019 Software AG, Darmstadt, Germany and/or its licensors
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
The formats acrbuild can use when writing log messages to stdout, selected with ``-F``/``--format``:

	- ``default``: Maven-style ``[LEVEL] message`` lines.
	- ``teamcity``: TeamCity service messages, including publishing of the archive as a build artifact.
	- ``make``: GNU Make style ``location: category: message`` lines, which IDEs can parse into problem lists.

The on-disk log file written with ``--logfile`` always uses its own detailed format.
"""

import logging, os

_artifactsLog = logging.getLogger('acrbuild.artifacts')

# formatters currently attached, which receive published artifacts
_outputFormattersInUse = []

_registeredConsoleFormatters = {}

class ConsoleFormatter(logging.Handler):
	"""
	Base class for a handler that writes log records to the console in a particular format.

	Subclasses implement `handleRecord`, using ``self.fmt.format(record)`` to get the message together with any
	exception trace.
	"""

	def __init__(self, output, buildOptions, **kwargs):
		"""
		@param output: The output stream.
		@param buildOptions: Dictionary of build options from the command line, such as the selected format.
		"""
		super().__init__()
		self.output = output
		self.buildOptions = buildOptions
		self.fmt = logging.Formatter()
		_outputFormattersInUse.append(self)

	def emit(self, record):
		self.handleRecord(record)
		self.output.flush()

	def handleRecord(self, record):
		raise NotImplementedError('Not Implemented')

	def close(self):
		if self in _outputFormattersInUse: _outputFormattersInUse.remove(self)
		super().close()

	def publishArtifact(self, logger, displayName, path):
		""" Called for each artifact published during the build, such as the archive and the log file.
		Most formats have no concept of artifacts, so the default implementation does nothing.

		@param logger: The logger to use for any messages written as part of publishing.
		@param displayName: A description of the artifact.
		@param path: The absolute path of the artifact.
		"""
		pass

def registerConsoleFormatter(name: str, handler):
	"""
	Make a console formatter class available to the ``--format`` option.
	"""
	_registeredConsoleFormatters[name] = handler
	return handler

def getConsoleFormatter(name: str):
	""" Returns the formatter class registered with the specified name (case insensitive), or None.

	>>> getConsoleFormatter('TeamCity') is TeamcityHandler, getConsoleFormatter('xml')
	(True, None)
	"""
	return {k.lower(): v for k, v in _registeredConsoleFormatters.items()}.get((name or '').lower())

def publishArtifact(displayName, path):
	""" Announce a file produced by the build to the console formatters in use, for formats such as Teamcity that
	can collect build artifacts.

	@param displayName: A description of the artifact, e.g. ``JavaEE Application Client archive``.
	@param path: The absolute path of the artifact. Empty values are ignored.
	"""
	if not path:
		_artifactsLog.debug('Ignoring empty artifact path for %s', displayName)
		return
	if not os.path.isabs(path):
		raise ValueError('Cannot publish artifact path "%s" because only absolute paths are supported'%path)

	path = os.path.normpath(path)
	if not os.path.exists(path):
		_artifactsLog.warning('Cannot find path for artifact publishing: "%s"', path)
	_artifactsLog.debug('Publishable artifact path for %s: "%s"', displayName, path)

	for f in list(_outputFormattersInUse):
		f.publishArtifact(_artifactsLog, displayName, path)

class DefaultConsoleFormatter(ConsoleFormatter):
	"""
	Prefixes each message with its level in the style of Maven, e.g. ``[WARNING] message``.
	"""
	LEVEL_NAMES = {'CRITICAL':'INFO'}

	def handleRecord(self, record):
		level = self.LEVEL_NAMES.get(record.levelname, record.levelname)
		self.output.write('[%s] %s\n'%(level, self.fmt.format(record)))

class TeamcityHandler(ConsoleFormatter):
	"""
	Writes messages as TeamCity service messages. Messages starting with ``***`` (the final outcome) become
	progress messages, and an ERROR outcome also becomes a build problem. The CRITICAL level is used for
	successful outcomes and artifacts, never for errors.
	"""

	@staticmethod
	def teamcityEscape(s):
		"""
		>>> TeamcityHandler.teamcityEscape("it's [done]|\\n")
		"it|'s |[done|]||"
		"""
		s = s.encode('ascii', errors='replace').decode('ascii').replace('\r', '').strip()
		for c in "|'[]":
			s = s.replace(c, '|'+c)
		return s.replace('\n', '|n')

	def handleRecord(self, record):
		message = record.getMessage()
		if message.startswith('##teamcity'):
			self.output.write('%s\n'%message)
			return

		text = TeamcityHandler.teamcityEscape(self.fmt.format(record))
		if message.startswith('***'):
			self.output.write("##teamcity[progressMessage '%s']\n"%text)
			if record.levelno == logging.ERROR:
				self.output.write("##teamcity[buildProblem description='%s']\n"%TeamcityHandler.teamcityEscape(message))
		elif record.levelno == logging.ERROR:
			self.output.write("##teamcity[message text='%s' status='ERROR']\n"%text)
		elif record.levelno == logging.WARNING:
			self.output.write("##teamcity[message text='%s' status='WARNING']\n"%text)
		else:
			self.output.write("##teamcity[message text='%s']\n"%text)

	def publishArtifact(self, logger, displayName, path):
		logger.critical("##teamcity[publishArtifacts '%s']"%TeamcityHandler.teamcityEscape(path))

class MakeConsoleFormatter(ConsoleFormatter):
	"""
	Writes errors and warnings in the GNU Make format::

		location: category: description

	The location is the pom file for messages about the project model (logged with an ``acrbuild_filename``
	extra attribute), and ``acrbuild`` otherwise. Other messages are written as-is.
	"""
	CATEGORIES = {logging.ERROR:'error', logging.WARNING:'warning'}

	def handleRecord(self, record):
		category = self.CATEGORIES.get(record.levelno)
		if not category:
			self.output.write('%s\n'%self.fmt.format(record))
			return

		location = getattr(record, 'acrbuild_filename', None) or 'acrbuild'
		if getattr(record, 'acrbuild_line', None):
			location = '%s:%s'%(location, record.acrbuild_line)
		self.output.write('%s: %s: %s\n'%(location, category, self.fmt.format(record)))

registerConsoleFormatter('teamcity', TeamcityHandler)
registerConsoleFormatter('make', MakeConsoleFormatter)
registerConsoleFormatter('default', DefaultConsoleFormatter)
