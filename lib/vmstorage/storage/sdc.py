# SPDX-FileCopyrightText: Red Hat, Inc.
# SPDX-License-Identifier: GPL-2.0-or-later

"""
Cache of the storage domains known to the hypervisor, keyed by domain id.
"""

import logging

from vmstorage import utils
from vmstorage.storage import exception as se
from vmstorage.storage import sd


class StorageDomainIndex(object):
    """
    Lookup of storage domains by id.

    The index is built on first use by fetching all storage domains from the
    hypervisor, and is kept for the lifetime of the index. The hypervisor
    object must provide list_storage_domains(), returning StorageDomain
    records or dicts in the hypervisor representation.
    """

    log = logging.getLogger('storage.StorageDomainIndex')

    def __init__(self, hypervisor):
        self._hypervisor = hypervisor
        self._domains = None

    def lookup(self, sd_id):
        """
        Return the StorageDomain with sd_id, or None if the hypervisor does
        not know this domain.

        Raises se.DomainLookupError if the domains cannot be fetched.
        """
        return self._index().get(sd_id)

    def refresh(self):
        self.log.info("Invalidating storage domain index")
        self._domains = None

    def _index(self):
        if self._domains is None:
            self._domains = self._fetch()
        return self._domains

    def _fetch(self):
        with utils.stopwatch("Fetching storage domains", level=logging.INFO,
                             log=self.log):
            try:
                domains = list(self._hypervisor.list_storage_domains())
            except Exception as e:
                raise se.DomainLookupError(
                    "Cannot list storage domains", error=str(e)) from e

        index = {}
        for domain in domains:
            if not isinstance(domain, sd.StorageDomain):
                domain = sd.StorageDomain.from_dict(domain)
            index[domain.id] = domain

        self.log.debug("Storage domains: %s", index)
        return index
