# SCAN hint: keys examined per round trip
SCAN_COUNT = 1000

# Keys per DEL call when resetting
DELETE_BATCH_SIZE = 500
