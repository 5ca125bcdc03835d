# fileutils - helper methods related to the file system
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
Helpers for creating, copying and deleting the files of a build, and for reading Java ``.properties`` files
such as filter files and ``pom.properties``.
"""

import shutil, os, os.path, time, platform, re
import io

import logging
log = logging.getLogger('acrbuild.fileutils')

__isWindows = platform.system()=='Windows'

if __isWindows: # Java tools reading our output use the win32 API, which races with files written through the POSIX API
	import win32file

	class Win32FileWriter(io.RawIOBase):
		"""
		A write-only file opened with CreateFile so that other processes can share it immediately.
		"""
		def __init__(self, dest, mode='w', encoding=None, errors=None, newline=None):
			super(Win32FileWriter, self).__init__()
			if 'w' not in mode: raise ValueError('Win32FileWriter can only be used for writing: mode=%r'%mode)
			self.dest = dest
			self.__text = None if 'b' in mode else io.TextIOWrapper(self, encoding=encoding, errors=errors, newline=newline)
			self.__handle = None

		def __enter__(self):
			self.__handle = win32file.CreateFile(self.dest, win32file.GENERIC_WRITE,
				win32file.FILE_SHARE_READ | win32file.FILE_SHARE_WRITE | win32file.FILE_SHARE_DELETE,
				None, win32file.CREATE_ALWAYS, win32file.FILE_ATTRIBUTE_NORMAL, None)
			return self if self.__text is None else self.__text

		def writable(self): return True

		def write(self, data):
			return win32file.WriteFile(self.__handle, data)[1]

		def close(self):
			handle, self.__handle = self.__handle, None
			if handle is None: return # the text wrapper closes us as well
			if self.__text is not None: self.__text.close()
			win32file.CloseHandle(handle)

		def __exit__(self, ex_type, ex_val, tb):
			self.close()

	openForWrite = Win32FileWriter
else:
	openForWrite = open
"""
Open a file for writing, with the same arguments as `open`. Must be used in a ``with`` statement.
"""

def mkdir(newdir):
	""" Create the specified directory and any missing parents; does nothing if it already exists.

	@return: newdir, so that calls can be chained.
	"""
	path = normLongPath(newdir)
	if os.path.isfile(path):
		raise IOError('Cannot create directory "%s" as a file with that name already exists'%newdir)
	try:
		os.makedirs(path, exist_ok=True)
	except OSError as e:
		if not os.path.isdir(path): # unless a concurrent build created it
			raise IOError('Problem creating directory %s: %s'%(newdir, e))
	return newdir

def deleteFile(path, allowRetry=True):
	"""Delete the specified file if it exists.

	On failure the deletion is retried once after a short delay, since virus checkers and indexers on Windows
	often hold newly written files open for a moment.

	@param path: The file to delete. It is an error if this is a directory.
	@param allowRetry: Set to False to fail immediately.
	"""
	longpath = normLongPath(path)
	if not os.path.lexists(longpath): return
	if os.path.isdir(longpath):
		raise OSError('Cannot delete %s as it is a directory not a file'%path)

	attempts = 2 if allowRetry else 1
	for attempt in range(attempts):
		try:
			os.remove(longpath)
			return
		except FileNotFoundError:
			return
		except OSError as e:
			if attempt+1 == attempts:
				raise OSError('Unable to delete file %s: %s'%(path, e.strerror or e))
			log.debug('Failed to delete file %s (%s), will retry in 5 seconds', path, e)
			time.sleep(5.0)

def copyFile(src, dest):
	""" Copy the contents and permission bits of a single file, creating the destination's parent directory if needed.
	"""
	if not os.path.isfile(src):
		raise IOError('Cannot copy "%s" as it is not a file'%src)
	mkdir(os.path.dirname(os.path.abspath(dest)))
	src, dest = normLongPath(src), normLongPath(dest)
	with open(src, 'rb') as inp, openForWrite(dest, 'wb') as out:
		shutil.copyfileobj(inp, out)
	shutil.copymode(src, dest)

_PROPERTIES_ESCAPES = {'t':'\t', 'n':'\n', 'r':'\r', 'f':'\f'}

def _unescapeProperty(text):
	def replace(m):
		c = m.group(1)
		if c.startswith('u'): return chr(int(c[1:], 16))
		return _PROPERTIES_ESCAPES.get(c, c)
	return re.sub(r'\\(u[0-9a-fA-F]{4}|.)', replace, text)

def parsePropertiesFile(lines):
	"""
	Parse the lines of a Java properties file, returning an ordered list of (key, value, lineno) tuples
	where lineno is the line the property starts on.

	Keys are separated from values by ``=``, ``:`` or whitespace; ``#`` and ``!`` start comment lines; a
	trailing backslash continues the value on the next line; backslash escapes (including ``\\uXXXX``) are
	decoded.

	>>> parsePropertiesFile(['a','b=c',' z  =  x', 'a=d', '#g=h', '! i=j'])
	[('a', '', 1), ('b', 'c', 2), ('z', 'x', 3), ('a', 'd', 4)]
	>>> parsePropertiesFile(['path=c:\\\\\\\\dir\\\\\\\\file', 'url=http://host:8080/x', 'key value'])
	[('path', 'c:\\\\dir\\\\file', 1), ('url', 'http://host:8080/x', 2), ('key', 'value', 3)]
	>>> parsePropertiesFile(['list = one, \\\\', '    two', 'name=\\\\u0041BC'])
	[('list', 'one, two', 1), ('name', 'ABC', 3)]
	"""
	result = []
	pending, startLine = None, 0
	for lineNo, line in enumerate(lines, start=1):
		line = line.rstrip('\r\n').lstrip()
		if pending is None:
			if not line or line[0] in '#!': continue
			startLine = lineNo
			pending = ''

		# an odd number of trailing backslashes means a continuation
		trailing = len(line)-len(line.rstrip('\\'))
		if trailing % 2 == 1:
			pending += line[:-1]
			continue
		pending += line

		m = re.match(r'((?:\\.|[^\\=:\s])*)\s*[=:]?\s*(.*)\Z', pending, re.DOTALL)
		result.append((_unescapeProperty(m.group(1)), _unescapeProperty(m.group(2)), startLine))
		pending = None

	if pending:
		log.debug('Ignoring incomplete continuation at end of properties file: %s', pending)
	return result

def normLongPath(path):
	"""
	Make a path absolute and normalized. On Windows the ``\\\\?\\`` prefix is also added so that paths longer
	than 260 characters can be used, and the drive letter is lower-cased so that equivalent paths compare equal.

	A trailing slash, which marks a directory, is preserved.
	"""
	if not path: return path
	if __isWindows and path.startswith('\\\\?\\'):
		return path.replace('/', '\\')

	isdir = path.endswith('/') or path.endswith(os.sep)
	path = os.path.abspath(path)+(os.sep if isdir else '')
	if __isWindows:
		if len(path) > 1 and path[1] == ':': path = path[0].lower()+path[1:]
		path = '\\\\?\\UNC\\'+path.lstrip('\\') if path.startswith('\\\\') else '\\\\?\\'+path
	return path
