"""
launchguard — anti-bot защита запуска fungible токена.

- ownership: двухшаговая передача владения
- gatekeeper: anti-bot допуск переводов (лимит, throttle, whitelist)
- permit: EIP-712 permit с восстановлением подписанта
- pipeline: экземпляр контракта, связывающий компоненты с ledger
"""

__version__ = "0.1.0"
