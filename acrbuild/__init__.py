# acrbuild - JavaEE Application Client archive builder
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
acrbuild builds the JavaEE Application Client archive (``.jar``) for a project described by a Maven ``pom.xml``.

Run it with ``python -m acrbuild``, or programmatically::

	context = BuildContext({'maven.acr.filterDeploymentDescriptor':'true'})
	project = loadProject('pom.xml', context)
	AppClientJar().run(context, project)

See `acrbuild.targets.appclient` for the supported parameters.
"""
