import functools
import inspect
import re


class InvalidOptionValue(Exception):
    pass


def check_option(name, value, options, ignore_list=[]):
    """
    Checks that an option has a valid value, raising :class:`InvalidOptionValue` otherwise.

    :param name: The name of the option to check.
    :param value: The value of the option.
    :param options: List of valid option values.
    :param ignore_list: Do not raise an error if value is in this list.

    .. rubric:: Example

    .. code-block::

        level = check_option('LOG_LEVEL', os.getenv('LOG_LEVEL'), ['INFO', 'DEBUG'], ignore_list=[None])

    """
    if value not in options and value not in ignore_list:
        raise InvalidOptionValue(
            f"Invalid option value {name}={value}. Use one of {options}."
        )
    return value


class ParameterChoiceError(ValueError):
    def __init__(self, name, err_value, values):
        super().__init__(f"Parameter {name}={err_value} needs to be one of {values}.")


def choices(name, values, doc=True):
    """
    Decorator that checks a parameter against a list of valid values. Only explicitly provided values are checked - defaults are not.

    :param name: The parameter name.
    :param values: The valid choices as an iterable.
    :param doc: If ``True``, the choices are appended after the ``:param <param name>:`` string (if any) in the doc string.
    """

    values = list(values)

    def wrapper(fxn):
        if doc and fxn.__doc__:
            fxn.__doc__ = re.sub(
                f"(:\\s*param\\s+){name}(\\s*:)",
                f"\\1{name}\\2 ``{values}``",
                fxn.__doc__,
            )
        signature = inspect.signature(fxn)

        @functools.wraps(fxn)
        def check_and_call(*args, **kwargs):
            params = signature.bind(*args, **kwargs)
            if name in params.arguments and params.arguments[name] not in values:
                raise ParameterChoiceError(name, params.arguments[name], values)
            return fxn(*args, **kwargs)

        return check_and_call

    return wrapper
