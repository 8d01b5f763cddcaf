class GolfTripError(Exception):
    status_code = 400
    code = "BAD_REQUEST"
    detail = "Invalid request"

    def __init__(self, detail=None):
        if detail is not None:
            self.detail = detail
        super().__init__(self.detail)


class NotFoundError(GolfTripError):
    status_code = 404
    code = "NOT_FOUND"

    def __init__(self, entity, entity_id):
        super().__init__(f"{entity} not found")
        self.entity = entity
        self.entity_id = entity_id


class FourballLimitError(GolfTripError):
    code = "FOURBALL_LIMIT_EXCEEDED"
    detail = "Maximum 2 fourballs allowed per day"


class PlayerAlreadyAssignedError(GolfTripError):
    code = "PLAYER_ALREADY_ASSIGNED"

    def __init__(self, player_id):
        super().__init__("Player already assigned to another fourball")
        self.player_id = player_id


class InvalidMatchPairingError(GolfTripError):
    code = "INVALID_PAIRING"
    detail = "Each pair needs two different players from its own team"


class ScoreConflictError(GolfTripError):
    status_code = 409
    code = "SCORE_CONFLICT"
    detail = "A score for this round, player and hole was written concurrently"
