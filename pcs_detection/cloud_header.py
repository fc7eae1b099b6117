from collections import namedtuple

# Metadata carried alongside a cloud: sequence number, timestamp (microseconds) and the coordinate
# frame the points are expressed in. Passed through conversions untouched.
CloudHeader = namedtuple("CloudHeader", ["seq", "stamp", "frame_id"], defaults=(0, 0, ""))
