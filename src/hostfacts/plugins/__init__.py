"""Builtin plugins, discovered by ``PluginLoader.load_package()``."""
