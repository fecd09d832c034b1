class ToolError(Exception):
    """
    Raised for configuration errors of the tools: missing input, existing
    output without the overwrite option, invalid option values or unknown
    columns. These abort processing of the current input before anything is
    written.
    """

    pass
