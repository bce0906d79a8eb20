"""
Countdown timer overlay for steeping, rendered inline on the dashboard.

Steep buttons only need data attributes; the script below wires them up:

    <button class="steep-time-btn" data-steep-seconds="30" data-steep-index="0"
            data-tea-id="..." data-tea-name="...">30s</button>

Starting a timer replaces any running one. A short tone plays on start and a
three-beep chime at zero. Used steeps are remembered per tea in
sessionStorage until the Reset button clears them.
"""
from app.layout import esc

USED_STEEPS_KEY = "tea-timer:used-steeps"

TIMER_OVERLAY_HTML = """
<div class="timer-overlay" id="timer-overlay" hidden>
  <span>⏱</span>
  <span id="timer-tea-name"></span>
  <span class="timer-clock" id="timer-clock">0:00</span>
  <button type="button" class="secondary" id="timer-stop">Stop</button>
</div>
"""

TIMER_SCRIPT = """
<script>
(function () {
  var STORAGE_KEY = "%(storage_key)s";
  var overlay = document.getElementById("timer-overlay");
  var nameEl = document.getElementById("timer-tea-name");
  var clockEl = document.getElementById("timer-clock");
  var interval = null;
  var remaining = 0;
  var audioCtx = null;

  function ctx() {
    var Ctor = window.AudioContext || window.webkitAudioContext;
    if (!Ctor) return null;
    if (!audioCtx) audioCtx = new Ctor();
    if (audioCtx.state === "suspended") audioCtx.resume();
    return audioCtx;
  }

  function beep(freq, startAt, duration) {
    var ac = ctx();
    if (!ac) return;
    var osc = ac.createOscillator();
    var gain = ac.createGain();
    osc.type = "sine";
    osc.frequency.value = freq;
    gain.gain.setValueAtTime(0.0001, ac.currentTime + startAt);
    gain.gain.exponentialRampToValueAtTime(0.3, ac.currentTime + startAt + 0.02);
    gain.gain.exponentialRampToValueAtTime(0.0001, ac.currentTime + startAt + duration);
    osc.connect(gain);
    gain.connect(ac.destination);
    osc.start(ac.currentTime + startAt);
    osc.stop(ac.currentTime + startAt + duration + 0.05);
  }

  function startTone() { beep(660, 0, 0.15); }

  function chime() {
    beep(880, 0, 0.25);
    beep(880, 0.35, 0.25);
    beep(1175, 0.7, 0.5);
  }

  function render() {
    var m = Math.floor(remaining / 60);
    var s = remaining %% 60;
    clockEl.textContent = m + ":" + (s < 10 ? "0" : "") + s;
  }

  function stop() {
    if (interval) clearInterval(interval);
    interval = null;
    overlay.hidden = true;
  }

  function start(seconds, teaName) {
    stop();
    remaining = seconds;
    nameEl.textContent = teaName;
    render();
    overlay.hidden = false;
    startTone();
    interval = setInterval(function () {
      remaining -= 1;
      if (remaining <= 0) {
        remaining = 0;
        render();
        chime();
        stop();
        return;
      }
      render();
    }, 1000);
  }

  function loadUsed() {
    try {
      return JSON.parse(sessionStorage.getItem(STORAGE_KEY) || "{}");
    } catch (e) {
      return {};
    }
  }

  function saveUsed(used) {
    sessionStorage.setItem(STORAGE_KEY, JSON.stringify(used));
  }

  function paintUsed() {
    var used = loadUsed();
    document.querySelectorAll(".steep-time-btn").forEach(function (btn) {
      var list = used[btn.dataset.teaId] || [];
      btn.classList.toggle("used", list.indexOf(Number(btn.dataset.steepIndex)) !== -1);
    });
    document.querySelectorAll(".steep-reset-btn").forEach(function (btn) {
      btn.hidden = !(used[btn.dataset.teaId] || []).length;
    });
  }

  document.querySelectorAll(".steep-time-btn").forEach(function (btn) {
    btn.addEventListener("click", function () {
      var used = loadUsed();
      var teaId = btn.dataset.teaId;
      var idx = Number(btn.dataset.steepIndex);
      used[teaId] = used[teaId] || [];
      if (used[teaId].indexOf(idx) === -1) used[teaId].push(idx);
      saveUsed(used);
      paintUsed();
      start(Math.round(Number(btn.dataset.steepSeconds)), btn.dataset.teaName);
    });
  });

  document.querySelectorAll(".steep-reset-btn").forEach(function (btn) {
    btn.addEventListener("click", function () {
      var used = loadUsed();
      delete used[btn.dataset.teaId];
      saveUsed(used);
      paintUsed();
    });
  });

  document.getElementById("timer-stop").addEventListener("click", stop);
  paintUsed();
})();
</script>
""" % {"storage_key": USED_STEEPS_KEY}


def steep_buttons_html(tea_id: str, tea_name: str, steep_times) -> str:
    """One button per steep plus the Reset control for this tea."""
    buttons = "".join(
        f'<button type="button" class="steep-time-btn secondary" data-steep-seconds="{esc(t)}" '
        f'data-steep-index="{idx}" data-tea-id="{esc(tea_id)}" data-tea-name="{esc(tea_name)}">{esc(t)}s</button>'
        for idx, t in enumerate(steep_times)
    )
    reset = (
        f'<button type="button" class="steep-reset-btn secondary" data-tea-id="{esc(tea_id)}" hidden>Reset</button>'
    )
    return f'<div class="steep-times">{buttons}{reset}</div>'


def timer_overlay_html() -> str:
    return TIMER_OVERLAY_HTML + TIMER_SCRIPT


__all__ = ["USED_STEEPS_KEY", "steep_buttons_html", "timer_overlay_html"]
