"""Kernel and operating system facts."""

import platform

from hostfacts.framework.plugin import Plugin, collect_data


class Kernel(Plugin):
    provides = ("kernel", "os", "os_version")

    def _set_kernel(self) -> platform.uname_result:
        uname = platform.uname()
        self.set_attribute(
            "kernel",
            {
                "name": uname.system,
                "release": uname.release,
                "version": uname.version,
                "machine": uname.machine,
            },
        )
        return uname

    @collect_data()
    def collect(self):
        uname = self._set_kernel()
        self.set_attribute("os", uname.system.lower())
        self.set_attribute("os_version", uname.release)

    @collect_data("windows")
    def collect_windows(self):
        # release is the product name ("10", "2019Server"); the build number is in version
        uname = self._set_kernel()
        self.set_attribute("os", "windows")
        self.set_attribute("os_version", uname.version)
