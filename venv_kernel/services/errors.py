class ProvisionerException(Exception):
    pass


class ConfigError(ProvisionerException):
    pass


class InterpreterNotFoundError(ProvisionerException):
    pass


class InterpreterNotExecutableError(ProvisionerException):
    pass


class VenvInterpreterMissingError(ProvisionerException):
    pass
