# Overview: Service-layer package; every operation takes a StorageAdapter as its first argument.
