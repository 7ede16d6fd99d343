# -*- coding: utf-8 -*-
"""
The 'reconnaissance' package contains the candidate enumerators, the probe
functions and the scanners built on top of them.

These tools cover the initial information-gathering phase of an assessment,
such as host discovery, port scanning, web content discovery and DNS
interrogation, mapping to MITRE ATT&CK TTPs.
"""
