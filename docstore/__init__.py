# docstore - generic item storage over document databases
#
# Modules:
# - config: Application settings
# - logging: Structured logging
# - storage: Store interface and backends (MongoDB)
