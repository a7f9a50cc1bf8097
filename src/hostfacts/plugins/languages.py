"""Root of the per-language facts filled in by the language plugins."""

from hostfacts.framework.plugin import Plugin, collect_data


class Languages(Plugin):
    provides = ("languages",)

    @collect_data()
    def collect(self):
        if not self.has_attribute("languages"):
            self.set_attribute("languages", {})
