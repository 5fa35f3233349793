from .storage import ConfigStorage
from .allow_list import AllowListManager
from .export_gate import ConfigurationExportGate

__all__ = ['ConfigStorage', 'AllowListManager', 'ConfigurationExportGate']
