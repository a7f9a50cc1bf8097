"""Facts about the Python interpreter running the collection."""

import platform
import sys

from hostfacts.framework.plugin import Plugin, collect_data


class Python(Plugin):
    provides = ("languages/python",)
    depends = ("languages",)

    @collect_data()
    def collect(self):
        self.set_attribute(
            "languages/python",
            {
                "version": platform.python_version(),
                "implementation": platform.python_implementation(),
                "executable": sys.executable,
                "platform": sys.platform,
            },
        )
