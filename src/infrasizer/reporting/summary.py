"""Plain-text summary of a calculation result (clipboard format)."""

from ..shared.schemas import CalculationResult


def summarize_result(result: CalculationResult) -> str:
    """
    Render a result as plain text, one block per server.

    Args:
        result: Engine output

    Returns:
        Blocks separated by blank lines
    """
    lines: list[str] = []
    if result.client_name:
        lines.append(f"Client: {result.client_name}")
    lines.append(f"Deployment: {result.solution_type.value.upper()}")

    if result.saas_message:
        lines.append(result.saas_message)
        return "\n\n".join(lines)

    for server in result.servers:
        block = f"{server.name}\n{server.cpu} | {server.ram} | {server.hdd}"
        if server.gpu:
            block += f"\nGPU: {server.gpu.type} ({server.gpu.memory})"
        lines.append(block)

    cost = result.rya_bot_cloud_cost
    if cost:
        lines.append(
            f"R-YaBot Cloud: ${cost.monthly_cost_usd:,.2f}/mo ({cost.tpm:,.0f} TPM)"
        )
    if result.dr_message:
        lines.append(result.dr_message)

    return "\n\n".join(lines)
