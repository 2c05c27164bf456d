import threading

from dmnd_proxy.proxy_state import (
    DownstreamState,
    DownstreamType,
    JdState,
    PoolState,
    ProxyError,
    ProxyState,
    ShareAccounterState,
    TpState,
    TranslatorState,
    UpstreamState,
    UpstreamType,
    global_state,
)


def test_new_state_is_up():
    state = ProxyState()
    assert state.get_errors() == []
    assert state.is_proxy_down() == (False, None)


def test_pool_down_is_reported():
    state = ProxyState()
    state.update_pool_state(PoolState.DOWN)
    assert state.get_errors() == [ProxyError("Pool", PoolState.DOWN)]
    down, description = state.is_proxy_down()
    assert down is True
    assert description == "Pool(Down)"


def test_errors_follow_fixed_order():
    state = ProxyState()
    state.update_upstream_state(UpstreamType.TRANSLATOR_UPSTREAM)
    state.update_downstream_state(DownstreamType.TRANSLATOR_DOWNSTREAM)
    state.update_inconsistency(1)
    state.update_translator_state(TranslatorState.DOWN)
    state.update_share_accounter_state(ShareAccounterState.DOWN)
    state.update_jd_state(JdState.DOWN)
    state.update_tp_state(TpState.DOWN)
    state.update_pool_state(PoolState.DOWN)
    components = [error.component for error in state.get_errors()]
    assert components == [
        "Pool",
        "Tp",
        "Jd",
        "ShareAccounter",
        "Translator",
        "InternalInconsistency",
        "Downstream",
        "Upstream",
    ]


def test_downstream_and_upstream_descriptions():
    state = ProxyState()
    state.update_downstream_state(DownstreamType.JD_CLIENT_MINING_DOWNSTREAM)
    state.update_upstream_state(UpstreamType.JDC_MINING_UPSTREAM)
    _, description = state.is_proxy_down()
    assert description == (
        "Downstream(Down([JdClientMiningDownstream])), Upstream(Down([JDCMiningUpstream]))"
    )


def test_downstream_update_replaces_previous():
    state = ProxyState()
    state.update_downstream_state(DownstreamType.JD_CLIENT_MINING_DOWNSTREAM)
    state.update_downstream_state(DownstreamType.TRANSLATOR_DOWNSTREAM)
    assert state.downstream == DownstreamState((DownstreamType.TRANSLATOR_DOWNSTREAM,))


def test_inconsistency_can_be_cleared():
    state = ProxyState()
    state.update_inconsistency(1)
    assert state.get_errors() == [ProxyError("InternalInconsistency", 1)]
    state.update_inconsistency(None)
    assert state.get_errors() == []


def test_setting_up_again_clears_error():
    state = ProxyState()
    state.update_tp_state(TpState.DOWN)
    state.update_tp_state(TpState.UP)
    assert state.is_proxy_down() == (False, None)


def test_update_proxy_state_up_resets_everything():
    state = ProxyState()
    state.update_pool_state(PoolState.DOWN)
    state.update_jd_state(JdState.DOWN)
    state.update_inconsistency(3)
    state.update_downstream_state(DownstreamType.TRANSLATOR_DOWNSTREAM)
    state.update_upstream_state(UpstreamType.TRANSLATOR_UPSTREAM)
    state.update_proxy_state_up()
    assert state.get_errors() == []
    assert state.downstream.is_up is True
    assert state.upstream == UpstreamState()


def test_global_state_is_shared():
    try:
        global_state().update_pool_state(PoolState.DOWN)
        assert global_state().get_errors() == [ProxyError("Pool", PoolState.DOWN)]
        assert global_state().is_proxy_down() == (True, "Pool(Down)")
    finally:
        global_state().update_proxy_state_up()
    assert global_state().get_errors() == []


def test_concurrent_updates_are_consistent():
    state = ProxyState()

    def worker():
        for _ in range(200):
            state.update_pool_state(PoolState.DOWN)
            state.update_pool_state(PoolState.UP)

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert state.get_errors() == []