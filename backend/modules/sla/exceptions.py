"""Exceções customizadas do módulo SLA"""


class SlaException(Exception):
    """Exceção base do módulo SLA"""
    pass


class HorarioInvalidoError(SlaException):
    """Erro quando horário comercial é inválido"""
    def __init__(self, hora_inicio: int, hora_fim: int):
        self.hora_inicio = hora_inicio
        self.hora_fim = hora_fim
        super().__init__(
            f"Horário inválido: início ({hora_inicio}) deve ser menor que fim ({hora_fim}), ambos entre 0 e 23"
        )


class DiasUteisInvalidosError(SlaException):
    """Erro quando a lista de dias úteis é vazia ou tem valores fora de 0-6"""
    def __init__(self, dias):
        self.dias = dias
        super().__init__(f"Dias úteis inválidos: {sorted(dias) if dias else dias}")


class ChamadoNaoEncontradoError(SlaException):
    """Erro quando chamado não é encontrado"""
    def __init__(self, cod_chamado: int):
        self.cod_chamado = cod_chamado
        super().__init__(f"Chamado {cod_chamado} não encontrado")
