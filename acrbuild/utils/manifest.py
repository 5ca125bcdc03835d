# manifest - reading and writing of jar manifest files
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
The `Manifest` model used for the ``META-INF/MANIFEST.MF`` entry of a jar.

Manifests are UTF-8 encoded, use CRLF line endings and have no line longer than 72 bytes; longer
headers are split onto continuation lines that begin with a single space.
"""

import re, io, logging

from acrbuild.utils.buildexceptions import ManifestException

log = logging.getLogger('acrbuild.manifest')

MANIFEST_PATH = 'META-INF/MANIFEST.MF'

MAX_LINE_BYTES = 72

_HEADER_NAME = re.compile(r'[A-Za-z0-9][A-Za-z0-9_-]{0,69}\Z')

class Attributes(object):
	"""
	An ordered, case-insensitive map of manifest header names to values.

	>>> a = Attributes()
	>>> a['Main-Class'] = 'a.B'
	>>> a['main-class']
	'a.B'
	>>> a['MAIN-CLASS'] = 'c.D'
	>>> list(a.items())
	[('Main-Class', 'c.D')]
	"""
	def __init__(self):
		self.__values = {} # lowercase name: (name, value)

	def __setitem__(self, name, value):
		if not _HEADER_NAME.match(name or ''):
			raise ManifestException('Invalid manifest header name: "%s"'%name)
		if value is None:
			raise ManifestException('Invalid value for manifest header "%s": None'%name)
		existing = self.__values.get(name.lower())
		# keep the original spelling and position when overwriting
		self.__values[name.lower()] = (existing[0] if existing else name, str(value))

	def __getitem__(self, name):
		return self.__values[name.lower()][1]

	def __delitem__(self, name):
		del self.__values[name.lower()]

	def __contains__(self, name):
		return name.lower() in self.__values

	def __len__(self):
		return len(self.__values)

	def get(self, name, default=None):
		return self.__values[name.lower()][1] if name in self else default

	def pop(self, name, default=None):
		v = self.__values.pop(name.lower(), None)
		return default if v is None else v[1]

	def items(self):
		return list(self.__values.values())

	def update(self, other):
		for k, v in (other.items() if hasattr(other, 'items') else other):
			self[k] = v

	def __repr__(self):
		return 'Attributes%s'%self.items()

class Manifest(object):
	"""
	A jar manifest, consisting of the main attributes and zero or more named sections.

	>>> m = Manifest()
	>>> m.mainAttributes['Created-By'] = 'acrbuild'
	>>> m.getSection('com/example/').update({'Sealed':'true'})
	>>> m.toBytes().decode('utf-8').replace('\\r\\n','\\n')
	'Manifest-Version: 1.0\\nCreated-By: acrbuild\\n\\nName: com/example/\\nSealed: true\\n\\n'
	"""
	def __init__(self):
		self.mainAttributes = Attributes()
		self.mainAttributes['Manifest-Version'] = '1.0'
		self.sections = {} # section name: Attributes, in insertion order

	def getSection(self, name, create=True):
		""" Returns the attributes of the named section, creating it if necessary (and create=True). """
		if name not in self.sections:
			if not create: return None
			if not name: raise ManifestException('Manifest section names must not be empty')
			self.sections[name] = Attributes()
		return self.sections[name]

	def merge(self, other):
		""" Add the attributes and sections of other into this manifest, overwriting any existing values. """
		self.mainAttributes.update(other.mainAttributes)
		for name, attributes in other.sections.items():
			self.getSection(name).update(attributes)

	def write(self, stream):
		""" Write this manifest to a binary stream. """
		version = self.mainAttributes.get('Manifest-Version', '1.0')
		stream.write(_formatHeader('Manifest-Version', version))
		for k, v in self.mainAttributes.items():
			if k.lower() == 'manifest-version': continue
			stream.write(_formatHeader(k, v))
		stream.write(b'\r\n')

		for name, attributes in self.sections.items():
			stream.write(_formatHeader('Name', name))
			for k, v in attributes.items():
				stream.write(_formatHeader(k, v))
			stream.write(b'\r\n')

	def toBytes(self):
		""" Return the encoded contents of this manifest as a byte string. """
		b = io.BytesIO()
		self.write(b)
		return b.getvalue()

	@staticmethod
	def parse(data):
		"""
		Parse the contents of a manifest file, supplied as bytes or a string.

		>>> m = Manifest.parse(b'Manifest-Version: 1.0\\r\\nClass-Path: a.jar b\\r\\n .jar\\r\\n\\r\\nName: x/\\r\\nSealed: true\\r\\n')
		>>> m.mainAttributes['class-path']
		'a.jar b.jar'
		>>> m.getSection('x/')['Sealed']
		'true'
		>>> Manifest.parse('Main-Class a.B')
		Traceback (most recent call last):
		...
		acrbuild.utils.buildexceptions.ManifestException: Invalid manifest line 1: "Main-Class a.B"
		"""
		if isinstance(data, bytes):
			if data.startswith(b'\xef\xbb\xbf'): data = data[3:]
			try:
				data = data.decode('utf-8')
			except UnicodeDecodeError as e:
				raise ManifestException('Manifest is not valid UTF-8: %s'%e)

		m = Manifest()
		# join continuation lines first, remembering the line number each header started on
		headers = []
		for lineno, line in enumerate(re.split('\r\n|\r|\n', data), 1):
			if line.startswith(' '):
				if not headers or headers[-1] is None:
					raise ManifestException('Invalid manifest line %d: continuation line without a header'%lineno)
				headers[-1][1] += line[1:]
			elif not line:
				headers.append(None)
			else:
				headers.append([lineno, line])

		current = m.mainAttributes
		sectionStart = False
		for h in headers:
			if h is None:
				sectionStart = True
				continue
			lineno, line = h
			if ': ' not in line:
				raise ManifestException('Invalid manifest line %d: "%s"'%(lineno, line))
			name, value = line.split(': ', 1)
			if sectionStart:
				sectionStart = False
				if name.lower() == 'name':
					current = m.getSection(value)
					continue
				if current is not m.mainAttributes:
					raise ManifestException('Invalid manifest line %d: a new section must begin with a Name header'%lineno)
			current[name] = value
		return m

def readManifest(path):
	""" Read and parse the specified manifest file. """
	with open(path, 'rb') as f:
		return Manifest.parse(f.read())

def _formatHeader(name, value):
	"""
	Encode a single header, splitting it over multiple lines if it exceeds 72 bytes. Lines are never split within
	a multi-byte UTF-8 character.

	>>> _formatHeader('Class-Path', 'foo.jar bar.jar wibble-12.3-r12345.jar third-party/ant2.jar third-party/ant-internal.jar').decode('ascii').replace('\\r\\n','\\n')
	'Class-Path: foo.jar bar.jar wibble-12.3-r12345.jar third-party/ant2.jar \\n third-party/ant-internal.jar\\n'
	"""
	line = ('%s: %s'%(name, value)).encode('utf-8')
	lines = []
	limit = MAX_LINE_BYTES
	while len(line) > limit:
		cut = limit
		while cut > 0 and (line[cut] & 0xC0) == 0x80: # utf-8 continuation byte
			cut -= 1
		lines.append(line[:cut])
		line = b' '+line[cut:]
	lines.append(line)
	return b''.join(l+b'\r\n' for l in lines)
