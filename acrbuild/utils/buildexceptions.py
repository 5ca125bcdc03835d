# exceptions - Holds the exception types raised while building an application client archive
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
Exceptions for problems encountered while building an application client archive.

`BuildException` is the base of everything acrbuild reports as a failed build (as opposed to an internal
error, which is reported with a stack trace). Each collaborator has its own subclass so that the
`acrbuild.targets.appclient.AppClientJar` target can describe which stage failed.
"""

import traceback, sys


class BuildException(Exception):
	""" An error caused by the project or plugin configuration, or by a problem in the build environment such as a
	missing or unreadable file.

	The message should contain all the diagnostic information the user needs, since no stack trace is printed.

	>>> str(BuildException('  Missing filter file\\n  in project myclient  '))
	'Missing filter file   in project myclient'
	>>> repr(ArchiverException('Duplicate entry: a.txt'))
	'ArchiverException<Duplicate entry: a.txt>'
	"""

	def __init__(self, message, causedBy=False):
		"""
		@param message: a description of the problem.

		@param causedBy: if True, the exception currently being handled is recorded as the cause, and its message
		appended unless this message already contains it. The stack trace of a cause that is not itself a
		BuildException is kept for `toMultiLineString`.
		"""
		if not message: raise ValueError('A BuildException must have a message')
		self.__msg = message.strip()
		self.__causedByTraceback = None

		if causedBy:
			excType, cause, tb = sys.exc_info()
			if isinstance(cause, BuildException):
				causeMessage = cause.getMessage()
			else:
				causeMessage = str(cause)
				self.__causedByTraceback = ''.join(traceback.format_exception(excType, cause, tb))
			if causeMessage and causeMessage not in self.__msg:
				self.__msg = '%s: %s'%(self.__msg, causeMessage)

		Exception.__init__(self, self.__msg)

	def getMessage(self):
		""" Returns the message, without the exception type. """
		return self.__msg

	def __repr__(self):
		return '%s<%s>'%(type(self).__name__, self.toSingleLineString())

	def __str__(self):
		return self.toSingleLineString()

	def toSingleLineString(self):
		""" Return the message with any line breaks replaced by spaces. """
		return self.__msg.replace('\n', ' ')

	def toMultiLineString(self, includeStack=False):
		""" Return the message, followed by the stack trace of the underlying cause if includeStack is True and the
		cause was not a BuildException.
		"""
		if includeStack and self.__causedByTraceback:
			return ('%s\n\nCaused by:\n%s'%(self.__msg, self.__causedByTraceback)).strip()
		return self.__msg

class ArchiverException(BuildException):
	""" Raised by the jar archiver when the archive cannot be assembled or written. """

class ManifestException(BuildException):
	""" Raised when a manifest cannot be read or created, e.g. because of an invalid header name. """

class FilteringException(BuildException):
	""" Raised by the resource filtering engine, e.g. when a filter file cannot be loaded. """

class DependencyResolutionRequiredException(BuildException):
	""" Raised when an operation needs the project's resolved runtime classpath but it has not been resolved.
	"""
	def __init__(self, project):
		self.project = project
		BuildException.__init__(self, 'Attempted to access the runtime classpath of project %s before it was resolved'%project)

class AcrExecutionException(BuildException):
	""" The single failure type raised by the application client archive target, wrapping whatever
	collaborator exception caused the build to fail.
	"""
