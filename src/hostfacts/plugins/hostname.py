"""Host naming facts."""

import socket

from hostfacts.framework.plugin import Plugin, collect_data


class Hostname(Plugin):
    provides = ("hostname", "fqdn", "machinename")

    @collect_data()
    def collect(self):
        machinename = socket.gethostname()
        self.set_attribute("machinename", machinename)
        self.set_attribute("hostname", machinename.split(".")[0])
        self.set_attribute("fqdn", socket.getfqdn(machinename))
