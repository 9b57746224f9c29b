from scim_reconciler import ScimConnector
from scim_reconciler.support.config_manager import ConfigManager
from scim_reconciler.support.logger import Logger

config = ConfigManager()
config.load_config()

prefix = config.get('prefix')
if prefix is None:
    prefix = ''

logger = Logger(config.get('debug', False), prefix=prefix, log_dir=config.get('logs.dir', './logs'))

connector = ScimConnector(config, logger)
try:
    connector.start()
finally:
    connector.close()
