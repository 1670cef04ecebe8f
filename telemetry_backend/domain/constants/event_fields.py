class EventFields:
    """MongoDB field names for events collection"""

    MONGO_ID = "_id"

    NAME = "name"
    PARAMS = "params"

    CREATED_AT = "createdAt"
    UPDATED_AT = "updatedAt"
