class ConnectorException(Exception):
    pass


class EntityNotFoundException(ConnectorException):
    pass


class DuplicateUserException(ConnectorException):
    pass


class DuplicateGroupException(ConnectorException):
    pass


class UnsupportedFilterException(ConnectorException):
    pass


class GroupNotFoundException(EntityNotFoundException):
    def __init__(self, group_id):
        super().__init__(f'Group {group_id} not found in directory')
        self.group_id = group_id


class FetchFailure(ConnectorException):
    def __init__(self, group_id, reason):
        super().__init__(f'Failed to fetch members of group {group_id}: {reason}')
        self.group_id = group_id
        self.reason = reason


class ReconcileCancelled(ConnectorException):
    pass
