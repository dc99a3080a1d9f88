class CmsException(Exception):
    """CMS 系统基础异常类"""
    def __init__(self, message, code=500, payload=None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.payload = payload

    def to_dict(self):
        rv = dict(self.payload or ())
        rv['error'] = self.message
        rv['code'] = self.code
        rv['success'] = False
        return rv

class ValidationFailure(CmsException):
    """页面校验失败，一次性携带全部违规信息"""
    def __init__(self, messages, payload=None):
        if isinstance(messages, str):
            messages = [messages]
        self.messages = list(messages)
        super().__init__('; '.join(self.messages), code=422, payload=payload)

    def to_dict(self):
        rv = super().to_dict()
        rv['messages'] = self.messages
        return rv

class NotFound(CmsException):
    """页面 / 用户 / 区块不存在"""
    def __init__(self, message="Not found.", payload=None):
        super().__init__(message, code=404, payload=payload)

class Forbidden(CmsException):
    """已登录但权限不足"""
    def __init__(self, message="Insufficient privileges to complete the requested operation.", payload=None):
        super().__init__(message, code=403, payload=payload)

class Unauthenticated(CmsException):
    """缺少登录身份"""
    def __init__(self, message="Not authenticated.", payload=None):
        super().__init__(message, code=401, payload=payload)

class PersistenceFailure(CmsException):
    """底层存储错误"""
    def __init__(self, message="Database error.", payload=None):
        super().__init__(message, code=500, payload=payload)
