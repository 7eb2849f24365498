from fastapi.encoders import jsonable_encoder


def create_response(success: bool, message: str, data=None, error=None):
    """Response envelope shared by action endpoints and error handlers"""
    response = {"success": success, "message": message}
    if data is not None:
        response["data"] = jsonable_encoder(data)
    if error is not None:
        response["error"] = jsonable_encoder(error)
    return response
