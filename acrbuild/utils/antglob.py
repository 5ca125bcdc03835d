# antglob - algorithm for globbing ant-style path expressions
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
Matching of archive entry paths against Ant-style include/exclude patterns such as ``**/*.class``.
"""

import re, logging

from acrbuild.utils.buildexceptions import BuildException
from acrbuild.utils.flatten import flatten

_log = logging.getLogger('acrbuild.antglob')

DEFAULT_EXCLUDES = [
	# editors and operating systems
	'**/*~', '**/#*#', '**/.#*', '**/%*%', '**/._*', '**/.DS_Store',
	# version control
	'**/CVS', '**/CVS/**', '**/.cvsignore',
	'**/RCS', '**/RCS/**', '**/SCCS', '**/SCCS/**',
	'**/vssver.scc', '**/project.pj',
	'**/.svn', '**/.svn/**',
	'**/.arch-ids', '**/.arch-ids/**',
	'**/.bzr', '**/.bzr/**',
	'**/.MySCMServerInfo',
	'**/.metadata', '**/.metadata/**',
	'**/.hg', '**/.hg/**', '**/.hgignore',
	'**/.git', '**/.git/**', '**/.gitignore', '**/.gitattributes',
	'**/BitKeeper', '**/BitKeeper/**', '**/ChangeSet', '**/ChangeSet/**',
	'**/_darcs', '**/_darcs/**', '**/.darcsrepo', '**/.darcsrepo/**', '**/-darcs-backup*', '**/.darcs-temp-mail',
]
"""
The patterns excluded from every directory added to an archive (unless default excludes are disabled), covering
the metadata files of source control systems and the backup files of common editors.
"""

class GlobPatternSet(object):
	"""
	A set of ant-style glob patterns used to decide which files of a directory go into an archive. A jar
	archiver holds one set for the includes and another for the excludes. Instances are immutable.

	Glob patterns may contain '*' (zero or more characters within a single path element),
	'?' (exactly one character within a path element) or '**' (zero or more whole path elements).
	A pattern ending with '/' is treated as if it ended with '/**'. Backslashes are treated as
	forward slashes. Matching is case sensitive.
	"""
	__patternCache = {} # static cache, since the same excludes are used for every directory

	STARSTAR = '**'

	@staticmethod
	def create(patterns):
		"""
		Return the (cached) GlobPatternSet matching any of the specified patterns.

		@param patterns: a string, or a list of one or more pattern strings. Empty pattern strings are ignored.

		>>> GlobPatternSet.create(['**/a', 'b/']) is GlobPatternSet.create(['**/a', 'b/'])
		True
		"""
		if isinstance(patterns, list): patterns = tuple(flatten(patterns)) # make it hashable
		if patterns in GlobPatternSet.__patternCache:
			return GlobPatternSet.__patternCache[patterns]

		p = GlobPatternSet(patterns)
		GlobPatternSet.__patternCache[patterns] = p
		return p

	def __init__(self, patterns):
		""" Use L{create}, which caches pattern sets, rather than this constructor.

		@private
		"""
		self.origpatterns = []
		self.patterns = [] # list of element lists

		for p in flatten(patterns):
			if not isinstance(p, str):
				raise BuildException('Invalid pattern (must be a string): %r'%(p,))
			p = p.strip()
			if not p: continue
			self.origpatterns.append(p)

			p = p.replace('\\', '/')
			if p.endswith('/'): p = p+GlobPatternSet.STARSTAR
			elements = [e for e in p.split('/') if e]

			for e in elements:
				if '**' in e and e != '**':
					raise BuildException('Invalid pattern (pattern elements containing "**" must not have any other characters): %s'%p)
			self.patterns.append([GlobPatternSet.__compileElement(e) for e in elements])

		self.matchesEverything = any(
			all(e is GlobPatternSet.STARSTAR for e in elements) for elements in self.patterns)

	def __str__(self):
		"""
		>>> str(GlobPatternSet.create(['**/*.class', 'META-INF/']))
		"['**/*.class', 'META-INF/']"
		"""
		return str(self.origpatterns)

	def __repr__(self):
		"""
		>>> repr(GlobPatternSet.create('**/*Test.class'))
		"GlobPatternSet['**/*Test.class']"
		"""
		return 'GlobPatternSet%s'%self.__str__()

	def __bool__(self):
		return len(self.patterns) > 0

	@staticmethod
	def __compileElement(element):
		if element == '**': return GlobPatternSet.STARSTAR
		if '*' not in element and '?' not in element: return element
		regex = ''.join('[^/]*' if c == '*' else '[^/]' if c == '?' else re.escape(c) for c in element)
		return re.compile(regex+r'\Z')

	@staticmethod
	def __elementMatch(elementPattern, element):
		if isinstance(elementPattern, str):
			return elementPattern == element
		return elementPattern.match(element) is not None

	@staticmethod
	def __match(pattern, path, p=0, y=0):
		# recursive so that ** can consume any number of path elements
		while p < len(pattern):
			element = pattern[p]
			if element is GlobPatternSet.STARSTAR:
				if p == len(pattern)-1: return True
				for i in range(y, len(path)+1):
					if GlobPatternSet.__match(pattern, path, p+1, i): return True
				return False
			if y >= len(path) or not GlobPatternSet.__elementMatch(element, path[y]):
				return False
			p += 1
			y += 1
		return y == len(path)

	def matches(self, path):
		"""
		Returns True if the specified path matches any of the patterns in this set
		or False if not.

		@param path: A path relative to the root of the directory being scanned. Backslashes and a
		trailing slash (for directories) are permitted.

		>>> GlobPatternSet.create(['**/**']).matches('a/b/c.class')
		True
		>>> GlobPatternSet.create(['META-INF/application-client.xml']).matches('META-INF/application-client.xml')
		True
		>>> GlobPatternSet.create(['META-INF/application-client.xml']).matches('META-INF/MANIFEST.MF')
		False
		>>> GlobPatternSet.create(['**/.git/**', '**/.git']).matches('sub/.git/')
		True
		"""
		if self.matchesEverything: return True
		elements = [e for e in path.replace('\\', '/').split('/') if e]
		for pattern in self.patterns:
			if GlobPatternSet.__match(pattern, elements):
				return True
		return False

	def couldMatchBelow(self, dirpath):
		"""
		Returns False only if nothing inside the specified directory could possibly match any pattern
		in this set. This is an optimization for os.walk; it may return True for a directory that turns out
		to contain no matches.

		>>> GlobPatternSet.create(['a/b/*.class']).couldMatchBelow('a')
		True
		>>> GlobPatternSet.create(['a/b/*.class']).couldMatchBelow('c')
		False
		>>> GlobPatternSet.create(['**/x']).couldMatchBelow('c/d')
		True
		"""
		elements = [e for e in dirpath.replace('\\', '/').split('/') if e]
		for pattern in self.patterns:
			i = 0
			while True:
				if i >= len(elements): return True
				if i >= len(pattern): break
				if pattern[i] is GlobPatternSet.STARSTAR: return True
				if not GlobPatternSet.__elementMatch(pattern[i], elements[i]): break
				i += 1
		return False

def antGlobMatch(pattern, path):
	"""
	Matches a single archive path against an ant-style glob pattern.

	>>> [antGlobMatch('**/*.class', p) for p in ['Main.class', 'com/example/Main.class', 'com/example/Main.java']]
	[True, True, False]
	>>> [antGlobMatch('com/*/Ma?n.class', p) for p in ['com/example/Main.class', 'com/a/b/Main.class']]
	[True, False]
	>>> antGlobMatch('com/**/internal/**/*.class', 'com/example/internal/impl/Secret.class')
	True
	>>> antGlobMatch('META-INF/', 'META-INF/maven/pom.xml'), antGlobMatch('META-INF\\\\*.xml', 'META-INF/application-client.xml')
	(True, True)
	>>> antGlobMatch('', '')
	False
	"""
	return GlobPatternSet.create([pattern]).matches(path)
