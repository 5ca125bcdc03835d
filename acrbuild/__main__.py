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
The acrbuild command line, which builds the JavaEE Application Client archive for a project::

	python -m acrbuild -f pom.xml [options]* [property=value]*
"""

import sys, os, getopt, logging
from functools import reduce

from acrbuild.buildcommon import ACRBUILD_VERSION
from acrbuild.buildcontext import BuildContext
from acrbuild.project import loadProject
from acrbuild.targets.appclient import AppClientJar
from acrbuild.utils.buildexceptions import BuildException
from acrbuild.utils.consoleformatter import _registeredConsoleFormatters, getConsoleFormatter, publishArtifact
from acrbuild.utils.fileutils import mkdir

log = logging.getLogger('acrbuild')

def main(args):
	""" Command line argument parser.

	@return: the process exit code; 0 for success.
	"""

	try:
		usage = [
'',
'JavaEE Application Client archive builder %s on Python %s.%s.%s'% (ACRBUILD_VERSION, sys.version_info[0], sys.version_info[1], sys.version_info[2]),
'',
'python -m acrbuild [options]* [property=value]*',
'',
'Properties such as maven.acr.filterDeploymentDescriptor=true can be given as',
'property=value or -Dproperty=value and override the defaults in the pom.',
'',
'Options:',
'   -f --file <file>          The project pom.xml (default is ./pom.xml)',
'   -D <property=value>       Set a user property',
'      --classpath <paths>    The resolved runtime classpath of the project, ',
'                             as jar paths separated by "%s"; needed for '%os.pathsep,
'                             manifest Class-Path entries',
'',
'   -l --log-level LEVEL      Set the log level to debug/info/warning',
'   -L --logfile <file>       Also write the log to the specified file',
'   -F --format               Message output format.',
'                             Options:',
] + [
'                                - '+ h for h in _registeredConsoleFormatters
] + [
]
		if reduce(max, list(map(len, usage))) > 80:
			raise Exception('Invalid usage string - all lines must be less than 80 characters')

		properties = {}
		pomFile = os.path.abspath('pom.xml')
		runtimeClasspath = None
		logLevel = None
		logFile = None
		format = 'default'

		opts, arguments = getopt.gnu_getopt(args, "h?f:D:l:L:F:",
			["help", "file=", "classpath=", "log-level=", "logfile=", "format="])

		for o, a in opts: # option arguments
			o = o.strip('-')
			if o in ["?", "h", "help"]:
				print('\n'.join(usage))
				return 0
			elif o in ["f", "file"]:
				pomFile = os.path.abspath(a)
			elif o in ["D"]:
				arguments.append(a)
			elif o in ["classpath"]:
				runtimeClasspath = [os.path.abspath(p) for p in a.split(os.pathsep) if p.strip()]
			elif o in ['l', 'log-level']:
				logLevel = getattr(logging, a.upper(), None)
				if not isinstance(logLevel, int):
					print('invalid log level "%s"'%a)
					return 1
			elif o in ['L', 'logfile']:
				logFile = a
			elif o in ['F', 'format']:
				if not getConsoleFormatter(a):
					print('invalid format "%s"; valid formatters are: %s'%(a, ', '.join(_registeredConsoleFormatters.keys())))
					print('\n'.join(usage))
					return 1
				format = a
			else:
				assert False, "unhandled option: '%s'" % o

		for o in arguments: # non-option arguments (i.e. no -- prefix)
			arg = o.strip()
			if not arg: continue
			if '=' not in arg:
				print('invalid argument "%s"; properties must be specified as property=value'%arg)
				print("For help use --help")
				return 2
			properties[arg.split('=', 1)[0]] = arg.split('=', 1)[1]

	except getopt.error as msg:
		print(msg)
		print("For help use --help")
		return 2

	logging.getLogger().setLevel(logLevel or logging.INFO)

	hdlr = getConsoleFormatter(format)(sys.stdout, {'format':format})
	hdlr.setLevel(logLevel or logging.INFO)
	logging.getLogger().addHandler(hdlr)

	try:
		if logFile:
			logFile = os.path.abspath(logFile)
			logdir = os.path.dirname(logFile)
			if logdir and not os.path.exists(logdir): mkdir(logdir)

			fileHdlr = logging.FileHandler(logFile, mode='w', encoding='UTF-8')
			fileHdlr.setFormatter(logging.Formatter('%(asctime)s %(relativeCreated)05d %(levelname)-8s [%(threadName)s %(thread)5d] %(name)-10s - %(message)s', None))
			fileHdlr.setLevel(logLevel or logging.INFO)
			logging.getLogger().addHandler(fileHdlr)

		log.info('Using acrbuild %s from %s on Python %s.%s.%s', ACRBUILD_VERSION, os.path.normpath(os.path.dirname(__file__)), sys.version_info[0], sys.version_info[1], sys.version_info[2])
		if properties: log.debug('User properties: %s', properties)

		try:
			context = BuildContext(properties, runtimeClasspath=runtimeClasspath)
			project = loadProject(pomFile, context)
			log.info('Building project %s from %s', project, pomFile)

			jarFile = AppClientJar().run(context, project)

			# using *** here means we get a valid final progress message
			log.critical('*** ACRBUILD SUCCEEDED: %s', jarFile)
			return 0
		finally:
			if logFile: publishArtifact('acrbuild logfile', logFile)

	except BuildException as e:
		log.error('*** ACRBUILD FAILED: %s', e.toMultiLineString(None))
		return 5

	except Exception as e:
		log.exception('*** ACRBUILD FAILED: ')
		return 6

def _main():
	sys.exit(main(sys.argv[1:]))

if __name__ == "__main__":
	_main()
