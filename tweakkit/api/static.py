"""
Static HTML for the browser console served at ``/``.
"""

CONSOLE_HTML = """<!doctype html>
<html>
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>TweakKit</title>
    <style>
      body {
        margin: 0;
        padding: 24px;
        min-height: 100vh;
        box-sizing: border-box;
        display: flex;
        justify-content: center;
        background: #0b0c0f;
        color: #e7e9ee;
        font-family: "IBM Plex Mono", Menlo, Monaco, monospace;
      }
      .terminal {
        width: min(960px, 100%);
        background: #12141a;
        border: 1px solid #1f2330;
        border-radius: 12px;
        display: flex;
        flex-direction: column;
        overflow: hidden;
      }
      header {
        padding: 14px 20px;
        border-bottom: 1px solid #1f2330;
        color: #99a1b5;
        letter-spacing: 0.2em;
        text-transform: uppercase;
        font-size: 13px;
      }
      #output {
        padding: 20px;
        min-height: 360px;
        max-height: 60vh;
        overflow-y: auto;
        white-space: pre-wrap;
        line-height: 1.6;
      }
      .prompt {
        display: flex;
        gap: 8px;
        padding: 14px 20px 20px;
        border-top: 1px solid #1f2330;
      }
      .prompt span { color: #7dd3fc; }
      input {
        flex: 1;
        background: transparent;
        border: none;
        outline: none;
        color: inherit;
        font: inherit;
      }
    </style>
  </head>
  <body>
    <div class="terminal">
      <header>TweakKit Console</header>
      <div id="output"></div>
      <div class="prompt">
        <span>&gt;</span>
        <input id="input" type="text" autocomplete="off" placeholder="Type a command..." />
      </div>
    </div>
    <script>
      const output = document.getElementById('output');
      const input = document.getElementById('input');
      const scheme = location.protocol === 'https:' ? 'wss' : 'ws';
      const socket = new WebSocket(`${scheme}://${location.host}/ws`);

      const writeLine = (text) => {
        const line = document.createElement('div');
        line.textContent = text;
        output.appendChild(line);
        output.scrollTop = output.scrollHeight;
      };

      socket.addEventListener('open', () => writeLine('Connected to TweakKit server.'));
      socket.addEventListener('message', (event) => event.data.split('\\n').forEach(writeLine));
      socket.addEventListener('close', () => writeLine('Disconnected. Refresh to reconnect.'));

      input.addEventListener('keydown', (event) => {
        if (event.key !== 'Enter') return;
        const value = input.value.trim();
        if (!value) return;
        writeLine(`> ${value}`);
        socket.send(value);
        input.value = '';
      });
    </script>
  </body>
</html>
"""
