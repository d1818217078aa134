from comfy_registry.registry.components import (
    SYSTEM_COMPONENTS,
    get_all_component_configs,
    get_all_components_with_names,
    get_component_config,
    get_optimal_component,
)


def test_system_components_non_empty_with_valid_structure():
    assert len(SYSTEM_COMPONENTS) > 0
    for name, config in SYSTEM_COMPONENTS.items():
        assert isinstance(name, str)
        assert config.type
        assert config.model_family
        assert isinstance(config.priority, (int, float))


def test_system_components_contain_essential_types():
    types = {c.type for c in SYSTEM_COMPONENTS.values()}
    assert {"vae", "clip", "t5"} <= types


def test_get_component_config_valid_name():
    config = get_component_config("ae.safetensors")
    assert config is not None
    assert config.type == "vae"
    assert config.model_family == "FLUX"
    assert config.priority == 100


def test_get_component_config_unknown_name_returns_none():
    assert get_component_config("nonexistent.safetensors") is None
    assert get_component_config("") is None


def test_get_all_component_configs_by_type():
    for t in {c.type for c in SYSTEM_COMPONENTS.values()}:
        configs = get_all_component_configs(type=t)
        assert configs
        assert all(c.type == t for c in configs)


def test_get_all_component_configs_no_filter_returns_everything_in_order():
    assert get_all_component_configs() == list(SYSTEM_COMPONENTS.values())


def test_get_all_component_configs_no_match_is_empty():
    assert get_all_component_configs(type="vae", model_family="NOPE") == []
    assert get_all_component_configs(type="lora") == []


def test_get_all_components_with_names_by_type():
    result = get_all_components_with_names(type="vae")
    assert result
    for entry in result:
        assert isinstance(entry.name, str)
        assert entry.config.type == "vae"
        assert SYSTEM_COMPONENTS[entry.name] == entry.config


def test_get_all_components_with_names_filters_by_model_family():
    result = get_all_components_with_names(type="vae", model_family="FLUX")
    assert result
    assert all(e.config.model_family == "FLUX" for e in result)
    assert all(e.config.type == "vae" for e in result)
    assert result[0].name == "ae.safetensors"


def test_get_all_components_with_names_keeps_table_order():
    names = [e.name for e in get_all_components_with_names(type="t5")]
    table_order = [n for n, c in SYSTEM_COMPONENTS.items() if c.type == "t5"]
    assert names == table_order


def test_every_type_family_pair_is_queryable():
    pairs = {(c.type, c.model_family) for c in SYSTEM_COMPONENTS.values()}
    for t, fam in pairs:
        result = get_all_components_with_names(type=t, model_family=fam)
        assert result
        assert all(
            e.config.type == t and e.config.model_family == fam
            for e in result
        )


def test_get_optimal_component_has_highest_priority():
    component = get_optimal_component("vae", "FLUX")
    assert component is not None
    for other in get_all_component_configs(type="vae", model_family="FLUX"):
        assert component.priority >= other.priority


def test_get_optimal_component_for_every_pair():
    pairs = {(c.type, c.model_family) for c in SYSTEM_COMPONENTS.values()}
    for t, fam in pairs:
        best = get_optimal_component(t, fam)
        candidates = get_all_component_configs(type=t, model_family=fam)
        assert best is not None
        assert best.priority == max(c.priority for c in candidates)


def test_get_optimal_component_absent_pair_returns_none():
    assert get_optimal_component("clip", "SDXL") is None
    assert get_optimal_component("unknown", "FLUX") is None


def test_queries_are_idempotent():
    assert get_component_config("clip_l.safetensors") == get_component_config(
        "clip_l.safetensors"
    )
    assert get_all_component_configs(type="t5") == get_all_component_configs(
        type="t5"
    )
    assert get_all_components_with_names(
        type="vae", model_family="SDXL"
    ) == get_all_components_with_names(type="vae", model_family="SDXL")
    assert get_optimal_component("t5", "FLUX") == get_optimal_component(
        "t5", "FLUX"
    )
