from datetime import date, datetime

from odontoforense.models.evidence import Evidence
from odontoforense.services.report_prompt import build_report_prompt, format_collection_date


def test_format_collection_date_uses_brazilian_layout() -> None:
    assert format_collection_date(datetime(2024, 1, 9, 8, 5, 3)) == '09/01/2024, 08:05:03'
    assert format_collection_date(date(2024, 1, 9)) == '09/01/2024, 00:00:00'
    assert format_collection_date(None) == 'não informada'


def test_build_report_prompt_renders_fixed_template() -> None:
    evidence = Evidence(
        case_id=5,
        name='Molar isolado',
        category='material biológico',
        collected_at=datetime(2023, 12, 1, 10, 0, 0),
        description='Dente com restauração',
        collection_location='Margem do rio',
        file_url='http://files/molar.png',
    )

    prompt = build_report_prompt(5, [evidence])

    assert prompt == (
        "Gere um laudo técnico e objetivo com base nas evidências a seguir, relacionadas ao caso '5'.\n\n"
        '1) Nome da Evidência: Molar isolado\n'
        '   Categoria: material biológico\n'
        '   Data de Coleta: 01/12/2023, 10:00:00\n'
        '   Descrição: Dente com restauração\n'
        '   Local de Retirada: Margem do rio\n'
        '   Arquivo: http://files/molar.png\n\n'
        'Com base nas evidências acima, elabore um laudo técnico com análise clara e objetiva.'
    )


def test_build_report_prompt_numbers_entries_in_order() -> None:
    items = [
        Evidence(case_id=1, name=f'Item {index}', category='imagem', collected_at=datetime(2024, 1, index))
        for index in range(1, 5)
    ]

    prompt = build_report_prompt(1, items)

    positions = [prompt.index(f'{index}) Nome da Evidência: Item {index}') for index in range(1, 5)]
    assert positions == sorted(positions)
    assert '5) Nome da Evidência' not in prompt
