# Should be all-lower, as the program name shown in help texts
RLIST_ENTRYPOINT_NAME = "rlist"
