"""
The 'core' package holds the probe engine shared by every reconnaissance tool:
the bounded scheduler, the result collector, the summarizer, the data model
and the configuration defaults.
"""
