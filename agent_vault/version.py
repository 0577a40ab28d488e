"""Agent Vault Meta information.
   Agent Vault keeps secret values out of the text an automated agent reads
   and writes.
"""
__title__ = 'agent_vault'
__description__ = (
   'Agent Vault redacts secrets from config files read by agents '
   'and restores them on write.'
)
__version__ = '0.3.0'
__license__ = 'Apache-2.0'
