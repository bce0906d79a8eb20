from app.timer import USED_STEEPS_KEY, steep_buttons_html, timer_overlay_html


def test_steep_buttons_carry_timer_data():
    html = steep_buttons_html("1700000000000", 'Bai "Hao" <Yinzhen>', [20, 25.5])
    assert html.count('class="steep-time-btn') == 2
    assert 'data-steep-seconds="20" data-steep-index="0"' in html
    assert 'data-steep-seconds="25.5" data-steep-index="1"' in html
    assert 'data-tea-name="Bai &quot;Hao&quot; &lt;Yinzhen&gt;"' in html
    assert 'class="steep-reset-btn secondary" data-tea-id="1700000000000" hidden>Reset' in html


def test_overlay_script_is_self_contained():
    html = timer_overlay_html()
    assert 'id="timer-overlay" hidden' in html
    assert f'"{USED_STEEPS_KEY}"' in html
    assert "sessionStorage" in html
    assert "AudioContext" in html
    assert "remaining % 60" in html
