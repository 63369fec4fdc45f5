"""workledger: task lifecycle and usage accounting backend."""
