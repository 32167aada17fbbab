from addon_operator.handlers import addon, addonoperator, probes

__all__ = ["addon", "addonoperator", "probes"]
