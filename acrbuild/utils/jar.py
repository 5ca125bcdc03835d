# jar - writing of jar archives using zipfile
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
Contains `JarArchiver`, which collects files and directories and writes them to a jar with a manifest.
"""

import os, stat, time, zipfile, shutil, logging

from acrbuild.utils.buildexceptions import ArchiverException
from acrbuild.utils.antglob import GlobPatternSet, DEFAULT_EXCLUDES
from acrbuild.utils.fileutils import mkdir, deleteFile, normLongPath
from acrbuild.utils.flatten import getStringList
from acrbuild.utils.manifest import Manifest, MANIFEST_PATH

log = logging.getLogger('acrbuild.jar')

META_INF = 'META-INF/'

DUPLICATES_SKIP = 'skip'
DUPLICATES_FAIL = 'fail'

# zip timestamps cannot represent anything earlier
_MIN_ZIP_TIME = (1980, 1, 1, 0, 0, 0)

_REPRODUCIBLE_FILE_MODE = 0o100644
_REPRODUCIBLE_DIR_MODE = 0o40755
_MSDOS_DIR_FLAG = 0x10

class _Entry(object):
	__slots__ = ['name', 'source', 'data']
	def __init__(self, name, source=None, data=None):
		self.name = name
		self.source = source # path on disk, or None
		self.data = data # bytes for generated entries

	@property
	def isdir(self): return self.name.endswith('/')

class JarArchiver(object):
	"""
	Collects the entries for a jar archive and writes it.

	Directory entries are always stored uncompressed; file entries are deflated unless compress is False.
	The manifest is always written first, as ``META-INF/`` followed by ``META-INF/MANIFEST.MF``, and the remaining
	entries follow in name order so the output does not depend on file system ordering.

	A generated manifest always replaces any ``META-INF/MANIFEST.MF`` that is added. By default a later entry with
	the same name as an earlier one is skipped; with duplicateBehavior set to ``fail`` it is an error:

	>>> archiver = JarArchiver()
	>>> archiver.addBytes('META-INF/MANIFEST.MF', b'Main-Class: Ignored')
	>>> archiver.addBytes('app.properties', b'a=1')
	>>> archiver.addBytes('app.properties', b'a=2')
	>>> archiver.duplicateBehavior = DUPLICATES_FAIL
	>>> archiver.addBytes('app.properties', b'a=3')
	Traceback (most recent call last):
	...
	acrbuild.utils.buildexceptions.ArchiverException: Duplicate archive entry "app.properties" from: "<generated>", "<generated>"
	"""
	def __init__(self):
		self.destFile = None
		self.compress = True
		self.forced = True
		self.duplicateBehavior = DUPLICATES_SKIP
		self.useDefaultExcludes = True
		self.includeEmptyDirs = True
		self.manifest = None
		self.reproducibleTime = None # a UTC time.struct_time, if reproducible
		self.__entries = {}

	def setDestFile(self, path):
		self.destFile = path

	def setManifest(self, manifest):
		self.manifest = manifest

	def configureReproducible(self, timestamp):
		"""
		Use a single fixed modification time and fixed permissions for every entry.

		@param timestamp: seconds since the epoch, or None to use the times and permissions of the files themselves.
		"""
		if timestamp is None:
			self.reproducibleTime = None
		else:
			self.reproducibleTime = time.gmtime(timestamp)
			log.debug('Using reproducible entry timestamp %s', time.strftime('%Y-%m-%dT%H:%M:%SZ', self.reproducibleTime))

	def __addEntry(self, entry):
		if entry.name == MANIFEST_PATH:
			log.debug('Skipping %s from %s since the manifest is generated', MANIFEST_PATH, entry.source)
			return
		existing = self.__entries.get(entry.name)
		if existing is not None:
			if entry.isdir: return
			if self.duplicateBehavior == DUPLICATES_FAIL:
				raise ArchiverException('Duplicate archive entry "%s" from: "%s", "%s"'%(entry.name, existing.source or '<generated>', entry.source or '<generated>'))
			log.debug('Skipping duplicate archive entry "%s" from "%s"', entry.name, entry.source)
			return
		self.__entries[entry.name] = entry

	def addFile(self, path, entryName):
		"""
		Add a single file to the archive.

		@param path: the file to add.
		@param entryName: the name of the entry within the archive, using forward slashes.
		"""
		if not os.path.isfile(path):
			raise ArchiverException('Cannot add "%s" to the archive as it is not a file'%path)
		self.__addEntry(_Entry(entryName.replace('\\', '/').lstrip('/'), source=path))

	def addBytes(self, entryName, data):
		""" Add a generated entry whose contents are the specified bytes. """
		self.__addEntry(_Entry(entryName, data=data))

	def addDirectory(self, directory, includes=None, excludes=None, prefix=''):
		"""
		Add the contents of a directory to the archive.

		@param directory: the directory to scan.
		@param includes: a list of ant-style patterns; only paths matching at least one are added (default: everything).
		@param excludes: a list of ant-style patterns; paths matching any of these are not added.
		@param prefix: a prefix for the entry names, e.g. 'WEB-INF/'.
		"""
		if not os.path.isdir(directory):
			raise ArchiverException('Cannot add "%s" to the archive as it is not a directory'%directory)
		includes = GlobPatternSet.create(getStringList(includes) or ['**'])
		excludes = getStringList(excludes)
		if self.useDefaultExcludes: excludes = excludes + DEFAULT_EXCLUDES
		excludes = GlobPatternSet.create(excludes)

		added = 0
		for root, dirs, files in os.walk(normLongPath(directory)):
			rel = os.path.relpath(root, normLongPath(directory)).replace(os.sep, '/')
			rel = '' if rel == '.' else rel+'/'
			dirs.sort()
			dirs[:] = [d for d in dirs if includes.couldMatchBelow(rel+d)]

			if rel and self.includeEmptyDirs and includes.matches(rel) and not excludes.matches(rel):
				self.__addEntry(_Entry(prefix+rel))

			for f in sorted(files):
				path = rel+f
				if not includes.matches(path) or excludes.matches(path):
					log.debug('Not adding excluded file: %s', path)
					continue
				self.__addEntry(_Entry(prefix+path, source=os.path.join(root, f)))
				added += 1
		log.debug('Added %d file(s) from %s', added, directory)

	def __isUpToDate(self):
		dest = normLongPath(self.destFile)
		if not os.path.isfile(dest): return False
		destTime = os.path.getmtime(dest)
		for e in self.__entries.values():
			if e.source and os.path.getmtime(e.source) > destTime:
				log.debug('Archive is not up to date since %s has changed', e.source)
				return False
		return True

	def __zipInfo(self, name, source):
		info = zipfile.ZipInfo(name)
		isdir = name.endswith('/')
		if self.reproducibleTime is not None:
			info.date_time = tuple(self.reproducibleTime[:6])
			mode = _REPRODUCIBLE_DIR_MODE if isdir else _REPRODUCIBLE_FILE_MODE
		else:
			if source:
				st = os.stat(source)
				info.date_time = max(_MIN_ZIP_TIME, tuple(time.localtime(st.st_mtime)[:6]))
				mode = st.st_mode
			else:
				info.date_time = max(_MIN_ZIP_TIME, tuple(time.localtime()[:6]))
				mode = _REPRODUCIBLE_DIR_MODE if isdir else _REPRODUCIBLE_FILE_MODE
			if isdir: mode = stat.S_IFDIR | 0o755
		info.external_attr = (mode & 0xFFFF) << 16
		if isdir:
			info.external_attr |= _MSDOS_DIR_FLAG
			# can't compress directory entries! (it messes up Java)
			info.compress_type = zipfile.ZIP_STORED
		else:
			info.compress_type = zipfile.ZIP_DEFLATED if self.compress else zipfile.ZIP_STORED
		return info

	def createArchive(self):
		"""
		Write the archive to the destination file.

		@return: True if the archive was written, False if it was skipped because it is up to date (only when
		forced is False).
		"""
		if not self.destFile:
			raise ArchiverException('You must set the destination jar file')
		if os.path.isdir(self.destFile):
			raise ArchiverException('The destination jar file "%s" is a directory'%self.destFile)
		if not self.forced and self.__isUpToDate():
			log.info('Archive %s is up to date, not rebuilding', self.destFile)
			return False

		# every file needs its parent directories to be present as entries
		names = set(self.__entries.keys())
		for name in list(names):
			parts = name.rstrip('/').split('/')[:-1]
			for i in range(1, len(parts)+1):
				names.add('/'.join(parts[:i])+'/')
		names.discard(META_INF)

		manifest = self.manifest if self.manifest is not None else Manifest()

		mkdir(os.path.dirname(os.path.abspath(self.destFile)))
		dest = normLongPath(self.destFile)
		log.debug('Writing %d entries to %s', len(names)+2, self.destFile)
		try:
			with zipfile.ZipFile(dest, 'w', zipfile.ZIP_DEFLATED) as output:
				output.writestr(self.__zipInfo(META_INF, None), b'')
				output.writestr(self.__zipInfo(MANIFEST_PATH, None), manifest.toBytes())
				for name in sorted(names):
					entry = self.__entries.get(name)
					source = entry.source if entry is not None else None
					info = self.__zipInfo(name, source)
					if entry is not None and entry.data is not None:
						output.writestr(info, entry.data)
					elif source:
						with open(normLongPath(source), 'rb') as inp, output.open(info, 'w') as out:
							shutil.copyfileobj(inp, out)
					else:
						output.writestr(info, b'')
		except BaseException:
			# don't leave a partial archive that would look up to date next time
			deleteFile(dest, allowRetry=False)
			raise
		return True
